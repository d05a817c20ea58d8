from insight_worker.services.decoding import (
    INCOMPLETE_JSON,
    MALFORMED_JSON,
    decode_structured,
    json_candidate,
)


def test_plain_json_object():
    outcome = decode_structured('{"themes": [], "emotions": [], "perspective": "p"}')
    assert outcome.ok
    assert outcome.data["perspective"] == "p"


def test_fenced_block_after_prose():
    text = 'Sure! ```json\n{"themes":[{"name":"Work"}],"perspective":"Keep going"}\n```'
    outcome = decode_structured(text)
    assert outcome.ok
    assert outcome.data["themes"][0]["name"] == "Work"
    assert outcome.data["perspective"] == "Keep going"


def test_fence_without_language_tag():
    outcome = decode_structured('```\n{"perspective": "x"}\n```')
    assert outcome.ok
    assert outcome.data == {"perspective": "x"}


def test_prose_around_object_is_stripped():
    text = 'Here is the analysis: {"perspective": "x", "themes": []} Hope this helps!'
    outcome = decode_structured(text)
    assert outcome.ok
    assert outcome.data["themes"] == []


def test_candidate_spans_first_to_last_brace():
    text = 'a {"perspective": {"inner": 1}} b'
    assert json_candidate(text) == '{"perspective": {"inner": 1}}'


def test_missing_marker_is_incomplete():
    outcome = decode_structured('{"themes": [], "emotions": []}')
    assert not outcome.ok
    assert outcome.failure == INCOMPLETE_JSON
    assert outcome.data is None


def test_truncated_reply_is_malformed():
    outcome = decode_structured('{"themes": [{"name": "Work", "count": 3}], "emotions": [{"name": "Ca')
    assert not outcome.ok
    assert outcome.failure == MALFORMED_JSON


def test_no_object_at_all():
    outcome = decode_structured("I could not analyze this entry.")
    assert outcome.failure == MALFORMED_JSON


def test_empty_text():
    assert decode_structured("").failure == MALFORMED_JSON


def test_array_in_braces_span_is_rejected():
    # the span is the object inside the array, which lacks the marker
    assert decode_structured('[{"themes": []}]').failure == INCOMPLETE_JSON
