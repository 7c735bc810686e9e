# src/poshanix_proxy/core/service.py
"""
Endpoint orchestration for the OCR and chat routes.

Both handlers return either a str (send as text/plain) or the parsed JSON
value (dict / list) the model produced.
"""
from __future__ import annotations

import json
import logging
import math
from typing import Any, List, Optional, Union

from poshanix_proxy.adapters.dispatch import UpstreamDispatcher
from poshanix_proxy.core.detect import is_nutrition_text
from poshanix_proxy.core.errors import MissingFieldError
from poshanix_proxy.core.logging import trace
from poshanix_proxy.core.normalize import extract_assistant_text
from poshanix_proxy.core.prompts import build_chat_messages, build_ocr_messages
from poshanix_proxy.models import ChatMessage, UserProfile, WaitingResponse

log = logging.getLogger(__name__)

Reply = Union[str, dict, list]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(literal: str) -> float:
    # 1e400 overflows to inf, which no JSON response can carry
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"out of range number {literal}")
    return value


def parse_reply(text: str) -> Reply:
    """
    Text that opens like a JSON document is parsed (strictly: no NaN, Infinity or numbers that overflow to inf).
    Anything else, including JSON that fails to parse, stays text.
    """
    if text.startswith(("{", "[")):
        try:
            return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
        except ValueError as exc:
            trace(log, "reply.not_json", error=repr(exc), length=len(text))
    return text


async def _ask(dispatcher: UpstreamDispatcher, messages: List[Any]) -> str:
    data = await dispatcher.dispatch(messages)
    return extract_assistant_text(data).strip()


async def handle_ocr(text: Optional[str], dispatcher: UpstreamDispatcher) -> Reply:
    if not text:
        raise MissingFieldError("missing text")

    reply = await _ask(dispatcher, build_ocr_messages(text))

    # off-topic model chatter never reaches the label screen
    if not is_nutrition_text(reply):
        log.info("ocr reply has no nutrition content; returning waiting status")
        return WaitingResponse().model_dump()

    return parse_reply(reply)


async def handle_chat(
    messages: Optional[List[ChatMessage]],
    message: Optional[str],
    profile: Optional[UserProfile],
    dispatcher: UpstreamDispatcher,
) -> Reply:
    if not messages and not message:
        raise MissingFieldError("missing messages or message")

    # a full conversation is forwarded untouched; the profile only shapes single messages
    msgs: List[Any] = list(messages) if messages else build_chat_messages(message, profile)

    reply = await _ask(dispatcher, msgs)
    return parse_reply(reply)
