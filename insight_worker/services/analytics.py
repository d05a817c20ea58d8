from __future__ import annotations

from typing import Dict, Iterable, List

from ..models.analysis import AnalysisResult
from ..models.insights import (
    EmotionAnalyticsResponse,
    EmotionSummary,
    ThemeAnalyticsResponse,
    ThemeSummary,
)
from .normalize import round_half_up

DEFAULT_EMOJI = "💭"

EMOTION_EMOJI = {
    "happy": "😊", "joy": "😄", "joyful": "😄", "excited": "🤩", "grateful": "🙏",
    "thankful": "🙏", "hopeful": "🌟", "optimistic": "🌈", "peaceful": "😌", "calm": "😌",
    "relaxed": "😌", "content": "😊", "satisfied": "😊", "proud": "😌", "confident": "💪",
    "motivated": "🔥", "inspired": "✨", "creative": "🎨", "focused": "🎯", "determined": "💪",
    "sad": "😢", "disappointed": "😞", "frustrated": "😤", "angry": "😠", "annoyed": "😒",
    "stressed": "😰", "anxious": "😰", "worried": "😟", "nervous": "😬", "overwhelmed": "😵",
    "tired": "😴", "exhausted": "😴", "lonely": "😔", "confused": "😕", "uncertain": "🤔",
    "doubtful": "🤔", "contemplative": "🤔", "reflective": "💭", "thoughtful": "💭",
    "curious": "🤔", "wondering": "💭", "introspective": "🧘", "mindful": "🧘", "aware": "👁️",
    "love": "❤️", "loved": "❤️", "caring": "💕", "compassionate": "💝", "empathetic": "🤗",
    "connected": "🤝", "supported": "🤗", "surprised": "😲", "amazed": "😲", "shocked": "😱",
    "impressed": "👏",
}

THEME_EMOJI = {
    "self-reflection": "🤔", "self-discovery": "🔍", "introspection": "💭", "mindfulness": "🧘",
    "growth": "🌱", "personal growth": "🌱", "self-improvement": "📈", "work": "💼",
    "career": "🎯", "job": "💼", "productivity": "⚡", "goals": "🎯", "achievement": "🏆",
    "family": "👨‍👩‍👧‍👦", "relationships": "❤️", "love": "💕", "friendship": "🤝",
    "social": "👥", "support": "🤗", "health": "🏥", "fitness": "💪", "exercise": "🏃",
    "wellness": "🌿", "mental health": "🧠", "self-care": "🧘", "balance": "⚖️",
    "emotions": "💭", "feelings": "💝", "anxiety": "😰", "stress": "😤", "sadness": "😔",
    "happiness": "😊", "joy": "😄", "peace": "☮️", "creativity": "🎨", "art": "🖼️",
    "music": "🎵", "writing": "✍️", "inspiration": "💡", "daily life": "📅", "routine": "🔁",
    "habits": "📋", "home": "🏡", "travel": "✈️", "adventure": "🗺️", "learning": "📚",
    "education": "🎓", "challenges": "⛰️", "obstacles": "🚧", "future": "🔮", "dreams": "💭",
    "plans": "📋", "gratitude": "🙏", "nature": "🌳", "spirituality": "🕯️",
    "meditation": "🧘", "purpose": "🎯", "change": "🔄", "transition": "🌉",
    "transformation": "🦋",
}


def emotion_emoji(name: str) -> str:
    return EMOTION_EMOJI.get(name.strip().lower(), DEFAULT_EMOJI)


def theme_emoji(name: str) -> str:
    return THEME_EMOJI.get(name.strip().lower(), DEFAULT_EMOJI)


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def summarize_emotions(analyses: Iterable[AnalysisResult], total_entries: int) -> EmotionAnalyticsResponse:
    """Aggregate emotions across entries, grouping names case-insensitively.

    Sorted by total percentage, highest first; the first item is the most
    common emotion. The first color seen for a name is kept.
    """
    totals: Dict[str, Dict[str, object]] = {}
    for analysis in analyses:
        for emotion in analysis.emotions:
            key = emotion.name.strip().lower()
            agg = totals.setdefault(key, {"total": 0, "occurrences": 0, "color": emotion.color})
            agg["total"] = int(agg["total"]) + emotion.percentage
            agg["occurrences"] = int(agg["occurrences"]) + 1

    breakdown: List[EmotionSummary] = [
        EmotionSummary(
            name=_capitalize(key),
            total_percentage=int(agg["total"]),
            average_percentage=round_half_up(int(agg["total"]) / int(agg["occurrences"])),
            occurrences=int(agg["occurrences"]),
            color=str(agg["color"]),
            emoji=emotion_emoji(key),
        )
        for key, agg in totals.items()
    ]
    breakdown.sort(key=lambda s: s.total_percentage, reverse=True)
    return EmotionAnalyticsResponse(
        most_common=breakdown[0] if breakdown else None,
        total_entries=total_entries,
        breakdown=breakdown,
    )


def summarize_themes(analyses: Iterable[AnalysisResult], total_entries: int) -> ThemeAnalyticsResponse:
    """Aggregate theme counts across entries, most important first."""
    totals: Dict[str, Dict[str, object]] = {}
    for analysis in analyses:
        for theme in analysis.themes:
            key = theme.name.strip().lower()
            agg = totals.setdefault(key, {"total": 0, "occurrences": 0, "emoji": theme.emoji or theme_emoji(key)})
            agg["total"] = int(agg["total"]) + theme.count
            agg["occurrences"] = int(agg["occurrences"]) + 1

    breakdown: List[ThemeSummary] = [
        ThemeSummary(
            name=_capitalize(key),
            total_count=int(agg["total"]),
            average_count=round_half_up(int(agg["total"]) / int(agg["occurrences"])),
            occurrences=int(agg["occurrences"]),
            emoji=str(agg["emoji"]),
        )
        for key, agg in totals.items()
    ]
    breakdown.sort(key=lambda s: s.total_count, reverse=True)
    return ThemeAnalyticsResponse(
        most_common=breakdown[0] if breakdown else None,
        total_entries=total_entries,
        breakdown=breakdown,
    )
