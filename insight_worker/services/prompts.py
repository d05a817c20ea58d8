from __future__ import annotations

import json
from enum import Enum
from typing import List, Optional

from ..models.analysis import PersonalizationContext


class TaskKind(str, Enum):
    REFLECTION = "free-form-reflection"
    TITLE = "title-generation"
    PERSPECTIVE = "alternative-perspective"
    ANALYSIS = "structured-analysis"


GOAL_DESCRIPTIONS = {
    "stress": "reducing stress and anxiety through reflection",
    "growth": "personal growth and self-understanding",
    "gratitude": "practicing gratitude and focusing on positives",
    "clarity": "achieving mental clarity and organizing thoughts",
    "habits": "building better habits and tracking progress",
    "creativity": "boosting creativity and unlocking potential",
}

CHALLENGE_DESCRIPTIONS = {
    "overwhelmed": "feeling overwhelmed with too many thoughts",
    "stuck": "feeling stuck in same patterns and problems",
    "anxious": "dealing with anxiety and racing thoughts",
    "direction": "lacking direction and clarity about goals",
    "relationships": "struggling with relationship connections",
    "confidence": "dealing with low self-confidence and self-doubt",
}

# (goal or challenge id, guidance line); order is the order lines appear in prompts
_GOAL_GUIDANCE = (
    ("stress", "Focus on identifying stress triggers and coping mechanisms"),
    ("growth", "Explore patterns of behavior and opportunities for self-improvement"),
    ("gratitude", "Help them notice and appreciate positive aspects of their experience"),
    ("clarity", "Guide them to organize their thoughts and gain mental clarity"),
)
_CHALLENGE_GUIDANCE = (
    ("overwhelmed", "Help break down overwhelming feelings into manageable pieces"),
    ("anxious", "Address anxiety with grounding techniques and perspective shifts"),
    ("stuck", "Explore new perspectives and potential paths forward"),
    ("confidence", "Reinforce their strengths and encourage self-compassion"),
)

_ANALYSIS_SCHEMA = """{
  "themes": [
    {
      "name": "Theme Name",
      "count": 3,
      "breakdown": "2-3 sentences explaining how this theme appears in the entry",
      "insights": ["Insight 1", "Insight 2", "Insight 3"],
      "emoji": "📝"
    }
  ],
  "emotions": [
    {"name": "Emotion1", "percentage": 60},
    {"name": "Emotion2", "percentage": 40}
  ],
  "perspective": "A thoughtful alternative perspective in 2-3 sentences"
}"""


def personal_context(context: Optional[PersonalizationContext]) -> str:
    if context is None:
        return ""
    lines: List[str] = []
    if context.goals:
        goals = ", ".join(GOAL_DESCRIPTIONS.get(g, g) for g in context.goals)
        lines.append(f"- The user's journaling goals include: {goals}")
    if context.challenges:
        challenges = ", ".join(CHALLENGE_DESCRIPTIONS.get(c, c) for c in context.challenges)
        lines.append(f"- The user is currently facing challenges with: {challenges}")
    refl = context.reflections
    if refl is not None:
        if refl.current_state and refl.current_state.strip():
            lines.append(f'- Current state of mind: "{refl.current_state.strip()}"')
        if refl.ideal_self and refl.ideal_self.strip():
            lines.append(f'- Who they want to become: "{refl.ideal_self.strip()}"')
        if refl.biggest_obstacle and refl.biggest_obstacle.strip():
            lines.append(f"- Biggest obstacle they're facing: \"{refl.biggest_obstacle.strip()}\"")
    if not lines:
        return ""
    return "\n\nPersonal Context:\n" + "\n".join(lines) + "\n"


def personal_guidance(context: Optional[PersonalizationContext]) -> str:
    if context is None:
        return ""
    lines = [f"- {text}" for key, text in _GOAL_GUIDANCE if key in context.goals]
    lines += [f"- {text}" for key, text in _CHALLENGE_GUIDANCE if key in context.challenges]
    if not lines:
        return ""
    return "\n\nPersonalized Guidance:\n" + "\n".join(lines) + "\n"


def _reflection_prompt(entry: str, context: Optional[PersonalizationContext]) -> str:
    return (
        "You are a calm, thoughtful psychiatrist. When I share a journal entry, reply in just 1-2 short lines:\n"
        "- Acknowledge my feeling.\n"
        "- Reflect back what you heard.\n"
        "- End with one open question to help me dig deeper.\n"
        + personal_context(context)
        + personal_guidance(context)
        + f'\nHere\'s my entry:\n"{entry}"'
    )


def _title_prompt(entry: str) -> str:
    return (
        "Create a short, meaningful title (3-6 words) for this journal entry. "
        "The title should capture the main theme or emotion. Return only the title, nothing else.\n\n"
        f'Journal entry:\n"{entry}"'
    )


def _perspective_prompt(entry: str, context: Optional[PersonalizationContext]) -> str:
    return (
        "You are a wise, compassionate therapist. Read this journal entry and provide an alternative "
        "perspective that helps the person see their situation differently. Your response should:\n\n"
        "- Reframe challenges as opportunities for growth\n"
        "- Highlight strengths and resilience they might not recognize\n"
        "- Offer a more balanced or positive lens on their experience\n"
        "- Encourage self-compassion and understanding\n"
        "- Provide gentle wisdom that promotes reflection\n"
        "- Be 3-4 sentences that feel supportive and insightful\n"
        + personal_context(context)
        + "\nFocus on helping them see:\n"
        "- What this experience might be teaching them\n"
        "- Hidden strengths they're demonstrating\n"
        "- How this moment fits into their larger journey\n"
        "- A more compassionate view of themselves\n\n"
        f'Journal entry:\n"{entry}"\n\n'
        "Provide only the alternative perspective, no other text."
    )


def _analysis_prompt(entry: str, context: Optional[PersonalizationContext]) -> str:
    # json.dumps escapes quotes and newlines so the entry cannot break the schema example
    escaped = json.dumps(entry, ensure_ascii=False)
    return (
        "You are a journal analysis AI. Analyze this journal entry and return ONLY a valid JSON "
        "response with exactly this structure:\n\n"
        + _ANALYSIS_SCHEMA
        + "\n\nCRITICAL REQUIREMENTS:\n"
        "- Return ONLY valid JSON, no markdown, no explanations, no extra text\n"
        "- Identify 2-4 main themes from: Work, Family, Health, Relationships, Self-Care, Growth, "
        "Stress, Goals, Creativity, etc.\n"
        "- Count represents theme importance (1-5 scale)\n"
        "- Each theme needs exactly: name, count, breakdown (string), insights (array of strings), "
        "emoji (single relevant emoji)\n"
        "- Choose appropriate emojis: 💼 (work), 👨‍👩‍👧‍👦 (family), 💪 (health), ❤️ (relationships), "
        "🧘 (self-care), 🌱 (growth), 😰 (stress), 🎯 (goals), 🎨 (creativity), 🤔 (reflection), etc.\n"
        "- Identify 2-4 emotions with percentages that sum to 100\n"
        "- Perspective should be supportive and reframe their situation positively\n"
        "- Always include the \"perspective\" field last\n"
        "- All strings must be properly escaped for JSON\n"
        + personal_context(context)
        + f"\nJournal entry: {escaped}\n\n"
        "Return only the JSON object:"
    )


def build_prompt(kind: TaskKind, entry: str, context: Optional[PersonalizationContext] = None) -> str:
    """Compose the full prompt for ``kind``.

    ``entry`` is expected to be non-blank; callers short-circuit empty entries
    before building a prompt. Title generation ignores ``context``.
    """
    text = entry.strip()
    if kind is TaskKind.REFLECTION:
        return _reflection_prompt(text, context)
    if kind is TaskKind.TITLE:
        return _title_prompt(text)
    if kind is TaskKind.PERSPECTIVE:
        return _perspective_prompt(text, context)
    if kind is TaskKind.ANALYSIS:
        return _analysis_prompt(text, context)
    raise ValueError(f"unsupported task kind: {kind!r}")


def suggest_journal_prompts(context: Optional[PersonalizationContext]) -> List[str]:
    """Writing prompts tailored to the user's goals and challenges."""
    prompts: List[str] = []
    goals = set(context.goals) if context else set()
    challenges = set(context.challenges) if context else set()

    if "stress" in goals:
        prompts += ["What moments today brought you peace?", "How did you handle stress today?"]
    if "growth" in goals:
        prompts += ["What did you learn about yourself today?", "How did you challenge yourself today?"]
    if "gratitude" in goals:
        prompts += ["What are three things you're grateful for today?", "Who made your day better?"]
    if "overwhelmed" in challenges:
        prompts += ["What felt manageable today?", "How can you simplify tomorrow?"]
    if "anxious" in challenges:
        prompts += [
            "What thoughts are you carrying today?",
            "What would you tell a friend feeling this way?",
        ]

    if not prompts:
        prompts = [
            "How are you feeling right now?",
            "What's on your mind today?",
            "What would make tomorrow better?",
        ]
    return prompts
