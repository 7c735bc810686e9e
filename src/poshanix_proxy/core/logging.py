# src/poshanix_proxy/core/logging.py
"""
Process logging for the proxy.

setup_logging() wires a single stderr handler on the root logger; trace()
emits one-line `event key=value ...` records at DEBUG for the upstream
call path and the normalizer.
"""
from __future__ import annotations
import logging
import os
from typing import Any, Mapping, Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs full request URLs at INFO; Google calls carry the API key in ?key=
_URL_LOGGING_CLIENTS = ("httpx", "httpcore")


def resolve_level(value: Union[str, int, None], default: int = logging.INFO) -> int:
    """
    Turn a level name ("debug", "WARNING") or number into a logging level.
    Unknown names give `default`.
    """
    if isinstance(value, int):
        return value
    name = (value or "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    # getLevelName maps unknown names to the string "Level <name>"
    return level if isinstance(level, int) else default


def setup_logging(level: Union[str, int, None] = None) -> int:
    """
    Configure root logging and return the level applied.

    `level` defaults to $LOG_LEVEL (INFO when unset). Safe to call again:
    when the root logger already has handlers (pytest, uvicorn) only the
    level changes. The HTTP client loggers stay at WARNING regardless.
    """
    applied = resolve_level(level if level is not None else os.getenv("LOG_LEVEL"))

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(applied)

    for name in _URL_LOGGING_CLIENTS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return applied


def _render_value(value: Any) -> str:
    return repr(value) if isinstance(value, str) else str(value)


def _fmt_kv(fields: Mapping[str, Any]) -> str:
    return " ".join(f"{key}={_render_value(val)}" for key, val in fields.items())


def trace(log: logging.Logger, event: str, **fields: Any) -> None:
    """Example: normalize.skip shape='candidates' error="KeyError('content')" """
    if log.isEnabledFor(logging.DEBUG):
        log.debug("%s %s", event, _fmt_kv(fields))
