"""Coerce decoded model output into a valid ``AnalysisResult``.

Every field is coerced and clamped on its own; one bad field never discards the
rest of the record. Each coercion is reported as a ``CoercionNote`` so callers
can log or assert on exactly what was defaulted.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..models.analysis import AnalysisResult, Emotion, Theme
from .prompts import TaskKind

UNKNOWN_THEME = "Unknown Theme"
MISSING_BREAKDOWN = "Theme analysis not available."
MISSING_INSIGHT = "Insight not available"
UNKNOWN_EMOTION = "Unknown"
DEFAULT_PERSPECTIVE = "Your willingness to reflect shows great self-awareness and courage."
DEFAULT_EMOTION_COLOR = "#6B7280"

MIN_THEME_COUNT = 1
MAX_THEME_COUNT = 5

_HEX_RE = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")

# Substring keyword -> color. First match wins, so more specific words
# ("hopeless") come before the words they contain ("hope").
EMOTION_COLORS: Tuple[Tuple[str, str], ...] = (
    ("hopeless", "#6366F1"),
    ("discontent", "#F87171"),
    ("contemplat", "#64748B"),
    ("reflect", "#64748B"),
    ("thought", "#64748B"),
    ("introspect", "#64748B"),
    ("hope", "#3B82F6"),
    ("optimis", "#3B82F6"),
    ("uncertain", "#F59E0B"),
    ("confus", "#F59E0B"),
    ("doubt", "#F59E0B"),
    ("grate", "#10B981"),
    ("thankful", "#10B981"),
    ("content", "#22C55E"),
    ("satisf", "#22C55E"),
    ("joy", "#FBBF24"),
    ("happ", "#FBBF24"),
    ("excit", "#F97316"),
    ("motivat", "#F97316"),
    ("determin", "#F97316"),
    ("calm", "#06B6D4"),
    ("peace", "#06B6D4"),
    ("relax", "#06B6D4"),
    ("curio", "#14B8A6"),
    ("love", "#EC4899"),
    ("caring", "#EC4899"),
    ("compassion", "#EC4899"),
    ("proud", "#A855F7"),
    ("confident", "#A855F7"),
    ("sad", "#6366F1"),
    ("lonel", "#6366F1"),
    ("disappoint", "#818CF8"),
    ("anxi", "#8B5CF6"),
    ("worr", "#8B5CF6"),
    ("nervous", "#8B5CF6"),
    ("fear", "#7C3AED"),
    ("overwhelm", "#DC2626"),
    ("stress", "#EF4444"),
    ("anger", "#DC2626"),
    ("angry", "#DC2626"),
    ("frustrat", "#F87171"),
    ("tired", "#94A3B8"),
    ("exhaust", "#94A3B8"),
)


@dataclass(frozen=True)
class CoercionNote:
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


def emotion_color(name: str) -> str:
    low = name.lower()
    for keyword, color in EMOTION_COLORS:
        if keyword in low:
            return color
    return DEFAULT_EMOTION_COLOR


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _as_number(value: Any) -> Optional[float]:
    """Numeric value of ``value``; +/-inf for out-of-range numbers, None otherwise."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int):
        try:
            num = float(value)
        except OverflowError:
            # json.loads yields arbitrary-precision ints
            num = math.copysign(math.inf, value)
    elif isinstance(value, float):
        num = value
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(num) else num


def _show(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) >= 10 ** 18:
        return f"{'-' if value < 0 else ''}<{value.bit_length()}-bit integer>"
    text = repr(value)
    return text if len(text) <= 40 else text[:37] + "..."


def _clean_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _text_field(raw: Dict[str, Any], key: str, default: str, path: str, notes: List[CoercionNote]) -> str:
    value = _clean_str(raw.get(key))
    if value is None:
        notes.append(CoercionNote(path, "missing or blank, defaulted"))
        return default
    if not isinstance(raw.get(key), str):
        notes.append(CoercionNote(path, "converted to string"))
    return value


def _theme_count(value: Any, path: str, notes: List[CoercionNote]) -> int:
    num = _as_number(value)
    if num is None:
        notes.append(CoercionNote(path, "not numeric, defaulted to 1"))
        return MIN_THEME_COUNT
    if math.isinf(num):
        count = MAX_THEME_COUNT if num > 0 else MIN_THEME_COUNT
    else:
        count = max(MIN_THEME_COUNT, min(MAX_THEME_COUNT, round_half_up(num)))
    if isinstance(value, bool) or not isinstance(value, int) or count != value:
        notes.append(CoercionNote(path, f"coerced {_show(value)} to {count}"))
    return count


def _insights(value: Any, path: str, notes: List[CoercionNote]) -> List[str]:
    if not isinstance(value, list):
        notes.append(CoercionNote(path, "not a list, defaulted"))
        return [MISSING_INSIGHT]
    kept = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    if len(kept) != len(value):
        notes.append(CoercionNote(path, f"dropped {len(value) - len(kept)} non-text item(s)"))
    if not kept:
        notes.append(CoercionNote(path, "empty, defaulted"))
        return [MISSING_INSIGHT]
    return kept


def _normalize_theme(raw: Any, index: int, notes: List[CoercionNote]) -> Theme:
    path = f"themes[{index}]"
    if not isinstance(raw, dict):
        notes.append(CoercionNote(path, "not an object, all fields defaulted"))
        raw = {}
    emoji = raw.get("emoji")
    if emoji is not None and not isinstance(emoji, str):
        notes.append(CoercionNote(f"{path}.emoji", "not a string, cleared"))
    return Theme(
        name=_text_field(raw, "name", UNKNOWN_THEME, f"{path}.name", notes),
        count=_theme_count(raw.get("count"), f"{path}.count", notes),
        breakdown=_text_field(raw, "breakdown", MISSING_BREAKDOWN, f"{path}.breakdown", notes),
        insights=_insights(raw.get("insights"), f"{path}.insights", notes),
        emoji=emoji.strip() if isinstance(emoji, str) else "",
    )


def _settle_remainder(values: List[int]) -> None:
    """Adjust rounded percentages in place so they sum to exactly 100."""
    remainder = 100 - sum(values)
    if remainder == 0 or not values:
        return
    step = 1 if remainder > 0 else -1
    order = sorted(range(len(values)), key=lambda i: (-values[i], i))
    i = 0
    while remainder != 0:
        idx = order[i % len(order)]
        if step > 0 or values[idx] > 0:
            values[idx] += step
            remainder -= step
        i += 1


def distribute_percentages(raw_values: List[float]) -> List[int]:
    """Scale non-negative weights to integer percentages summing to 100.

    A zero total is split evenly with the last entry taking the remainder.
    Infinite weights dominate: they share 100 and every finite weight gets 0.
    Otherwise values are rescaled, rounded half up, and the rounding remainder
    is settled starting from the largest entry.
    """
    if not raw_values:
        return []
    if any(math.isinf(v) for v in raw_values):
        raw_values = [1.0 if math.isinf(v) and v > 0 else 0.0 for v in raw_values]
    peak = max(raw_values)
    if peak <= 0:
        even = 100 // len(raw_values)
        return [even] * (len(raw_values) - 1) + [100 - even * (len(raw_values) - 1)]
    # dividing by the peak first keeps the sum finite for huge inputs
    weights = [v / peak for v in raw_values]
    total = sum(weights)
    scaled = [round_half_up(w * 100 / total) for w in weights]
    _settle_remainder(scaled)
    return scaled


def _normalize_emotions(value: Any, notes: List[CoercionNote]) -> List[Emotion]:
    if value is None:
        notes.append(CoercionNote("emotions", "missing, defaulted to empty"))
        return []
    if not isinstance(value, list):
        notes.append(CoercionNote("emotions", "not a list, defaulted to empty"))
        return []

    names: List[str] = []
    weights: List[float] = []
    colors: List[str] = []
    for index, raw in enumerate(value):
        path = f"emotions[{index}]"
        if not isinstance(raw, dict):
            notes.append(CoercionNote(path, "not an object, all fields defaulted"))
            raw = {}
        name = _text_field(raw, "name", UNKNOWN_EMOTION, f"{path}.name", notes)
        num = _as_number(raw.get("percentage"))
        if num is None:
            notes.append(CoercionNote(f"{path}.percentage", "not numeric, defaulted to 0"))
            num = 0.0
        elif num < 0:
            notes.append(CoercionNote(f"{path}.percentage", f"negative {num!r} clamped to 0"))
            num = 0.0
        elif math.isinf(num):
            notes.append(CoercionNote(f"{path}.percentage", "out of range, treated as dominant weight"))
        color = raw.get("color")
        if isinstance(color, str) and _HEX_RE.match(color.strip()):
            color = color.strip()
        else:
            if color is not None:
                notes.append(CoercionNote(f"{path}.color", f"invalid color {_show(color)} replaced"))
            color = emotion_color(name)
        names.append(name)
        weights.append(num)
        colors.append(color)

    percentages = distribute_percentages(weights)
    if any(p != w for p, w in zip(percentages, weights)):
        notes.append(CoercionNote("emotions", f"percentages rescaled to sum to 100 (was {sum(weights):g})"))
    return [
        Emotion(name=n, percentage=p, color=c)
        for n, p, c in zip(names, percentages, colors)
    ]


def normalize_analysis(raw: Any) -> Tuple[AnalysisResult, List[CoercionNote]]:
    """Build an ``AnalysisResult`` from an untyped decoded object.

    Returns the result together with the list of coercions applied. An already
    normalized result (as a dict) comes back unchanged with no notes.
    """
    notes: List[CoercionNote] = []
    if isinstance(raw, AnalysisResult):
        raw = raw.model_dump()
    if not isinstance(raw, dict):
        notes.append(CoercionNote("$", "not an object, all fields defaulted"))
        raw = {}

    themes_raw = raw.get("themes")
    if isinstance(themes_raw, list):
        themes = [_normalize_theme(t, i, notes) for i, t in enumerate(themes_raw)]
    else:
        notes.append(CoercionNote("themes", "missing or not a list, defaulted to empty"))
        themes = []

    emotions = _normalize_emotions(raw.get("emotions"), notes)
    perspective = _text_field(raw, "perspective", DEFAULT_PERSPECTIVE, "perspective", notes)
    return AnalysisResult(themes=themes, emotions=emotions, perspective=perspective), notes


_QUOTES = "\"'“”‘’`*"


def normalize_text(text: Optional[str], kind: TaskKind) -> Optional[str]:
    """Tidy free-form model text; None when nothing usable remains."""
    if not isinstance(text, str):
        return None
    cleaned = text.strip()
    if kind is TaskKind.TITLE and cleaned:
        cleaned = cleaned.splitlines()[0].strip()
        if cleaned.lower().startswith("title:"):
            cleaned = cleaned[len("title:"):].strip()
        cleaned = cleaned.strip(_QUOTES).strip()
    return cleaned or None
