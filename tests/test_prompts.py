import json

import pytest

from insight_worker.models.analysis import PersonalizationContext, Reflections
from insight_worker.services.prompts import TaskKind, build_prompt, suggest_journal_prompts


CONTEXT = PersonalizationContext(
    goals=["stress", "gratitude"],
    challenges=["anxious"],
    reflections=Reflections(current_state="  restless  ", ideal_self="", biggest_obstacle=None),
)


def test_analysis_prompt_demands_bare_json_with_schema():
    prompt = build_prompt(TaskKind.ANALYSIS, "Long day at work.")
    assert "Return ONLY valid JSON" in prompt
    for field in ('"themes"', '"emotions"', '"perspective"', '"count"', '"breakdown"', '"insights"', '"emoji"'):
        assert field in prompt
    assert "sum to 100" in prompt
    assert "1-5" in prompt


def test_analysis_prompt_escapes_the_entry():
    entry = 'She said "stop"\nand left.'
    prompt = build_prompt(TaskKind.ANALYSIS, entry)
    assert json.dumps(entry, ensure_ascii=False) in prompt


def test_entry_is_trimmed():
    prompt = build_prompt(TaskKind.REFLECTION, "   Hello there \n")
    assert '"Hello there"' in prompt


@pytest.mark.parametrize("kind", [TaskKind.REFLECTION, TaskKind.PERSPECTIVE, TaskKind.ANALYSIS])
def test_context_is_expanded_into_prompt(kind):
    prompt = build_prompt(kind, "entry", CONTEXT)
    assert "Personal Context:" in prompt
    assert "reducing stress and anxiety through reflection" in prompt
    assert "dealing with anxiety and racing thoughts" in prompt
    assert 'Current state of mind: "restless"' in prompt
    assert "Who they want to become" not in prompt


def test_reflection_prompt_adds_guidance():
    prompt = build_prompt(TaskKind.REFLECTION, "entry", CONTEXT)
    assert "Personalized Guidance:" in prompt
    assert "grounding techniques" in prompt


def test_title_prompt_ignores_context():
    assert build_prompt(TaskKind.TITLE, "entry", CONTEXT) == build_prompt(TaskKind.TITLE, "entry")
    assert "3-6 words" in build_prompt(TaskKind.TITLE, "entry")


def test_empty_context_adds_nothing():
    assert build_prompt(TaskKind.PERSPECTIVE, "entry", PersonalizationContext()) == build_prompt(
        TaskKind.PERSPECTIVE, "entry"
    )


def test_unknown_goal_ids_pass_through():
    prompt = build_prompt(TaskKind.REFLECTION, "entry", PersonalizationContext(goals=["sleep"]))
    assert "journaling goals include: sleep" in prompt


def test_suggestions_follow_goals_and_challenges():
    prompts = suggest_journal_prompts(CONTEXT)
    assert "How did you handle stress today?" in prompts
    assert "What are three things you're grateful for today?" in prompts
    assert "What would you tell a friend feeling this way?" in prompts


def test_default_suggestions():
    assert len(suggest_journal_prompts(None)) == 3
    assert suggest_journal_prompts(PersonalizationContext(goals=["creativity"])) == suggest_journal_prompts(None)
