# src/poshanix_proxy/adapters/gemini.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from poshanix_proxy.core.config import Settings
from poshanix_proxy.core.logging import trace

log = logging.getLogger(__name__)


def model_name(raw: str) -> str:
    # Normalize model name in case it came as "models/gemini-2.5-flash"
    if raw.startswith("models/"):
        return raw.split("/", 1)[1]
    return raw


def build_url(cfg: Settings, model: str) -> str:
    return cfg.endpoint or cfg.google_endpoint_template.format(model=model)


def build_payload(messages: List[Dict[str, str]]) -> Dict[str, Any]:
    """
    generateContent takes a single prompt here: every message's content,
    newline-joined. Roles are dropped.
    """
    prompt = "\n".join((m.get("content") or "") for m in messages)
    return {"contents": [{"parts": [{"text": prompt}]}]}


async def chat(
    client: httpx.AsyncClient,
    cfg: Settings,
    messages: List[Dict[str, str]],
    model: Optional[str] = None,
) -> Any:
    """Google Generative Language adapter. Returns the decoded body as-is."""
    name = model_name(model or cfg.model or cfg.google_model)
    url = build_url(cfg, name)
    params = {"key": cfg.api_key} if cfg.api_key else None
    # the key travels in params, never in the logged url
    trace(log, "upstream.request", vendor="google", model=name, url=url.split("?", 1)[0])

    r = await client.post(
        url,
        json=build_payload(messages),
        params=params,
        headers={"Content-Type": "application/json"},
    )
    return r.json()
