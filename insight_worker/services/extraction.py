"""Locate the answer text inside a provider response of unknown shape.

Providers disagree on where the generated text lives. Rather than branching per
vendor, ``SHAPES`` lists every known location in priority order and
``extract_text`` returns the first one that holds a non-blank string.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger("app.insights")

NO_RECOGNIZABLE_SHAPE = "no-recognizable-shape"

Matcher = Callable[[Any, bool], Optional[str]]


@dataclass(frozen=True)
class ExtractionOutcome:
    text: Optional[str] = None
    shape: Optional[str] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _get(obj: Any, *path: Any) -> Any:
    for key in path:
        if isinstance(key, int):
            if not isinstance(obj, list) or len(obj) <= key:
                return None
        elif not isinstance(obj, dict):
            return None
        obj = obj[key]
    return obj


def _content_text(content: Any) -> Optional[str]:
    # Newer chat APIs may return content as a list of typed parts
    if isinstance(content, list):
        parts = [
            part.get("text") for part in content
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        return _text("".join(parts))
    return _text(content)


def _message_content(body: Any, reasoning: bool) -> Optional[str]:
    return _content_text(_get(body, "choices", 0, "message", "content"))


def _reasoning_content(body: Any, reasoning: bool) -> Optional[str]:
    if not reasoning:
        return None
    return _text(_get(body, "choices", 0, "message", "reasoning_content"))


def _choice_text(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "choices", 0, "text"))


def _choice_content(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "choices", 0, "content"))


def _top_content(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "content"))


def _top_message_content(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "message", "content"))


def _top_text(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "text"))


def _top_response(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "response"))


def _top_output(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "output"))


def _result_content(body: Any, reasoning: bool) -> Optional[str]:
    return _text(_get(body, "result", "content"))


SHAPES: Tuple[Tuple[str, Matcher], ...] = (
    ("choices[0].message.content", _message_content),
    ("choices[0].message.reasoning_content", _reasoning_content),
    ("choices[0].text", _choice_text),
    ("choices[0].content", _choice_content),
    ("content", _top_content),
    ("message.content", _top_message_content),
    ("text", _top_text),
    ("response", _top_response),
    ("output", _top_output),
    ("result.content", _result_content),
)


def extract_text(body: Any, reasoning: bool = False) -> ExtractionOutcome:
    """Return the first non-blank answer text found in ``body``.

    ``reasoning`` enables the reasoning-content channel, which is consulted only
    when the final message content is empty. Its text is returned unparsed even
    when it holds the JSON answer.
    """
    for shape, matcher in SHAPES:
        try:
            text = matcher(body, reasoning)
        except Exception:  # noqa: BLE001
            logger.debug("shape matcher %s raised; skipping", shape, exc_info=True)
            continue
        if text is not None:
            return ExtractionOutcome(text=text, shape=shape)
    return ExtractionOutcome(failure=NO_RECOGNIZABLE_SHAPE)
