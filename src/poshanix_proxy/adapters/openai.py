# src/poshanix_proxy/adapters/openai.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from poshanix_proxy.core.config import Settings
from poshanix_proxy.core.logging import trace

log = logging.getLogger(__name__)


def build_payload(messages: List[Dict[str, str]], model: str, max_tokens: int) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
    }


async def chat(
    client: httpx.AsyncClient,
    cfg: Settings,
    messages: List[Dict[str, str]],
    model: Optional[str] = None,
) -> Any:
    """
    OpenAI-compatible chat completions adapter.

    Roles are preserved. The decoded body is returned as-is, whatever the
    HTTP status: error bodies go through the normalizer like any other shape.
    """
    url = cfg.endpoint or cfg.openai_endpoint
    name = model or cfg.model or cfg.openai_model
    payload = build_payload(messages, name, cfg.max_tokens)
    trace(log, "upstream.request", vendor="openai", model=name, url=url.split("?", 1)[0])

    headers = {"Content-Type": "application/json"}
    if cfg.api_key:
        headers["Authorization"] = f"Bearer {cfg.api_key}"

    r = await client.post(url, json=payload, headers=headers)
    return r.json()
