# src/poshanix_proxy/core/errors.py
from __future__ import annotations


class ProxyError(Exception):
    """Client-facing failure with an HTTP status. Rendered as {"error": message}."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(ProxyError):
    status_code = 400


class InvalidRequestError(ProxyError):
    status_code = 400
