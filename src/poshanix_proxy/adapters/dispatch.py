# src/poshanix_proxy/adapters/dispatch.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from poshanix_proxy.adapters import gemini, openai
from poshanix_proxy.core.config import GOOGLE_API_HOST, GOOGLE_KEY_PREFIX, ApiType, Settings
from poshanix_proxy.core.logging import trace
from poshanix_proxy.models import ChatMessage

log = logging.getLogger(__name__)

MessageLike = Union[ChatMessage, Dict[str, str]]


def resolve_api_type(cfg: Settings) -> ApiType:
    """
    Decide which upstream protocol to speak.

    - An explicit api_type (openai / google) is respected.
    - "auto" keeps the old sniffing: a Google endpoint host, or an API key
      with Google's key prefix, means Google. Everything else is OpenAI-compatible.
    """
    if cfg.api_type is not ApiType.auto:
        return cfg.api_type
    if cfg.endpoint and GOOGLE_API_HOST in cfg.endpoint:
        return ApiType.google
    if cfg.api_key.startswith(GOOGLE_KEY_PREFIX):
        return ApiType.google
    return ApiType.openai


def _as_dict(m: MessageLike) -> Dict[str, str]:
    if isinstance(m, ChatMessage):
        return m.model_dump()
    return {"role": m.get("role") or "user", "content": m.get("content") or ""}


class UpstreamDispatcher:
    """
    One outbound call per dispatch(). No retry; no timeout unless
    request_timeout is configured. Transport and decode errors propagate.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def api_type(self) -> ApiType:
        return resolve_api_type(self.settings)

    async def dispatch(self, messages: Sequence[MessageLike], model: Optional[str] = None) -> Any:
        msgs: List[Dict[str, str]] = [_as_dict(m) for m in messages]
        api_type = self.api_type
        trace(log, "upstream.call", api_type=api_type.value, messages=len(msgs))

        async with httpx.AsyncClient(timeout=self.settings.request_timeout, transport=self._transport) as client:
            if api_type is ApiType.google:
                return await gemini.chat(client, self.settings, msgs, model)
            return await openai.chat(client, self.settings, msgs, model)
