from insight_worker.models.analysis import AnalysisResult, Emotion, Theme
from insight_worker.services.analytics import (
    DEFAULT_EMOJI,
    emotion_emoji,
    summarize_emotions,
    summarize_themes,
    theme_emoji,
)
from insight_worker.services.fallback import empty_entry_analysis, fallback_analysis


def _analysis(emotions, themes=()):
    return AnalysisResult(
        themes=[Theme(name=n, count=c, breakdown="b", insights=["i"], emoji=e) for n, c, e in themes],
        emotions=[Emotion(name=n, percentage=p, color=c) for n, p, c in emotions],
        perspective="p",
    )


def test_emotions_grouped_case_insensitively():
    analyses = [
        _analysis([("Calm", 60, "#06B6D4"), ("tired", 40, "#94A3B8")]),
        _analysis([("calm", 25, "#000000"), ("Hopeful", 75, "#3B82F6")]),
    ]
    summary = summarize_emotions(analyses, total_entries=2)

    assert summary.total_entries == 2
    assert [e.name for e in summary.breakdown] == ["Calm", "Hopeful", "Tired"]
    calm = summary.breakdown[0]
    assert calm.total_percentage == 85
    assert calm.occurrences == 2
    assert calm.average_percentage == 43
    assert calm.color == "#06B6D4"
    assert calm.emoji == "😌"
    assert summary.most_common == calm


def test_no_entries_means_no_most_common():
    summary = summarize_emotions([], total_entries=0)
    assert summary.most_common is None
    assert summary.breakdown == []
    assert summarize_themes([], total_entries=0).most_common is None


def test_themes_ranked_by_total_count():
    summary = summarize_themes([fallback_analysis(), empty_entry_analysis()], total_entries=2)
    names = [t.name for t in summary.breakdown]
    assert names[0] == "Self-reflection"
    top = summary.most_common
    assert top.total_count == 7
    assert top.average_count == 4
    assert top.emoji == "🤔"


def test_theme_without_emoji_uses_lookup():
    summary = summarize_themes([_analysis([], themes=[("Work", 2, ""), ("Astronomy", 1, "")])], total_entries=1)
    by_name = {t.name: t for t in summary.breakdown}
    assert by_name["Work"].emoji == "💼"
    assert by_name["Astronomy"].emoji == DEFAULT_EMOJI


def test_emoji_lookups():
    assert emotion_emoji(" Grateful ") == "🙏"
    assert emotion_emoji("zen-like") == DEFAULT_EMOJI
    assert theme_emoji("Self-Care") == "🧘"
