from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

MALFORMED_JSON = "malformed-json"
INCOMPLETE_JSON = "incomplete-json"

# The schema asks for "perspective" last, so its absence usually means the
# reply was cut off by the output token limit.
COMPLETENESS_MARKER = "perspective"

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class DecodeOutcome:
    data: Optional[Dict[str, Any]] = None
    failure: Optional[str] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None


def json_candidate(text: str) -> Optional[str]:
    """Strip prose and code fences around the first embedded JSON object."""
    cleaned = text.strip()
    if "```" in cleaned:
        fence = _FENCE_RE.search(cleaned)
        if fence:
            cleaned = fence.group(1).strip()
    match = _OBJECT_RE.search(cleaned)
    if match is None:
        return None
    return match.group(0)


def decode_structured(text: str) -> DecodeOutcome:
    candidate = json_candidate(text or "")
    if candidate is None:
        return DecodeOutcome(failure=MALFORMED_JSON, detail="no JSON object found")
    try:
        data = json.loads(candidate)
    except ValueError as e:
        return DecodeOutcome(failure=MALFORMED_JSON, detail=str(e))
    if not isinstance(data, dict):
        return DecodeOutcome(failure=MALFORMED_JSON, detail=f"top-level {type(data).__name__}, expected object")
    if COMPLETENESS_MARKER not in data:
        return DecodeOutcome(failure=INCOMPLETE_JSON, detail=f"missing '{COMPLETENESS_MARKER}'")
    return DecodeOutcome(data=data)
