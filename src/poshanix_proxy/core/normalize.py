# src/poshanix_proxy/core/normalize.py
"""
Reduce an upstream LLM response of unknown shape to the assistant's text.

Shapes are tried in priority order, first hit wins:

  candidates  Google Generative Language  {candidates: [{content: {parts: [{text}]}}]}
  choices     OpenAI chat completions     {choices: [{message: {content}}]} / {choices: [{text}]}
  output      responses-style APIs        {output: [{content: [{text}]}]}
  str         already plain text
  anything    compact JSON dump ("" if it can't be dumped)

extract_assistant_text() never raises.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Optional, Tuple

from .logging import trace

log = logging.getLogger(__name__)


def _part_text(part: Any) -> str:
    if part is None:
        raise TypeError("null part")
    # bare strings or other non-object parts carry no text field
    if not isinstance(part, dict):
        return ""
    return str(part.get("text") or "")


def _join_text(parts: List[Any]) -> str:
    return "".join(_part_text(p) for p in parts)


def _from_candidates(value: Any) -> Optional[str]:
    candidates = value.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    parts = candidates[0]["content"]["parts"]
    if isinstance(parts, list):
        return _join_text(parts)
    return None


def _from_choices(value: Any) -> Optional[str]:
    choices = value.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    msg = choice.get("message") or choice
    content = msg.get("content") or msg.get("text")
    if not content:
        return None
    # some OpenAI-compatible gateways send content as a list of parts
    if isinstance(content, list):
        return _join_text(content)
    return content if isinstance(content, str) else str(content)


def _from_output(value: Any) -> Optional[str]:
    output = value.get("output")
    if not isinstance(output, list):
        return None
    content = output[0]["content"]
    if isinstance(content, list):
        return _join_text(content)
    return None


_SHAPES: Tuple[Tuple[str, Callable[[Any], Optional[str]]], ...] = (
    ("candidates", _from_candidates),
    ("choices", _from_choices),
    ("output", _from_output),
)


def _is_falsy(value: Any) -> bool:
    # empty containers are still a response worth dumping
    return value is None or (not value and not isinstance(value, (list, dict)))


def extract_assistant_text(value: Any) -> str:
    if _is_falsy(value):
        return ""

    if isinstance(value, dict):
        for shape, extract in _SHAPES:
            try:
                text = extract(value)
            except Exception as exc:
                trace(log, "normalize.skip", shape=shape, error=repr(exc))
                continue
            if text is not None:
                trace(log, "normalize.hit", shape=shape, length=len(text))
                return text

    if isinstance(value, str):
        return value

    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        trace(log, "normalize.dump_failed", error=repr(exc))
        return ""
