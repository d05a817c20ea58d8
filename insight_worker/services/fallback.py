from __future__ import annotations

from datetime import date
from typing import Optional

from ..models.analysis import AnalysisResult, Emotion, Theme

FALLBACK_REFLECTION = (
    "I'm here to listen and support you. Sometimes it helps to simply acknowledge what "
    "you're feeling right now. What stands out most to you about this moment?"
)

FALLBACK_PERSPECTIVE = (
    "Every experience, even difficult ones, offers opportunities for growth and "
    "self-understanding. Your willingness to reflect and seek different perspectives shows "
    "remarkable strength and wisdom. Consider how this moment might be teaching you something "
    "valuable about yourself or your resilience."
)


def fallback_reflection() -> str:
    return FALLBACK_REFLECTION


def fallback_perspective() -> str:
    return FALLBACK_PERSPECTIVE


def fallback_title(today: Optional[date] = None) -> str:
    d = today or date.today()
    return f"Journal Entry - {d.month}/{d.day}/{d.year}"


def fallback_analysis() -> AnalysisResult:
    """Hand-written analysis used whenever the model path fails."""
    return AnalysisResult(
        themes=[
            Theme(
                name="Self-Reflection",
                count=4,
                breakdown="Your entry shows deep introspection and willingness to examine your thoughts and feelings.",
                insights=[
                    "You demonstrate strong self-awareness",
                    "You're actively processing your experiences",
                    "You show courage in facing difficult emotions",
                ],
                emoji="🤔",
            ),
            Theme(
                name="Daily Life",
                count=3,
                breakdown="You're navigating the complexities of everyday experiences and finding meaning in routine moments.",
                insights=[
                    "You notice details in your daily experiences",
                    "You seek meaning in ordinary moments",
                    "You're building awareness of life patterns",
                ],
                emoji="📅",
            ),
            Theme(
                name="Emotions",
                count=3,
                breakdown="Your emotional landscape is rich and varied, showing both vulnerability and strength.",
                insights=[
                    "You acknowledge your feelings honestly",
                    "You're developing emotional intelligence",
                    "You show resilience in processing emotions",
                ],
                emoji="💭",
            ),
        ],
        emotions=[
            Emotion(name="Contemplative", percentage=40, color="#64748B"),
            Emotion(name="Hopeful", percentage=30, color="#3B82F6"),
            Emotion(name="Uncertain", percentage=20, color="#F59E0B"),
            Emotion(name="Grateful", percentage=10, color="#10B981"),
        ],
        perspective=(
            "Your willingness to write and reflect shows incredible self-awareness and courage. "
            "Sometimes the act of putting thoughts into words is itself a form of healing and growth."
        ),
    )


def empty_entry_analysis() -> AnalysisResult:
    """Analysis for a blank entry; no model call is made."""
    return AnalysisResult(
        themes=[
            Theme(
                name="Self-Reflection",
                count=3,
                breakdown="Taking time to reflect, even briefly, shows mindfulness and self-awareness.",
                insights=[
                    "You are practicing mindful reflection",
                    "Every moment of introspection has value",
                ],
                emoji="🤔",
            )
        ],
        emotions=[Emotion(name="Contemplative", percentage=100, color="#64748B")],
        perspective="Even brief moments of reflection demonstrate your commitment to self-awareness and growth.",
    )
