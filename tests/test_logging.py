import json
import logging

from insight_worker.logging import JsonFormatter


def _record(**extra):
    record = logging.LogRecord("app.insights", logging.WARNING, __file__, 1, "provider %s failed", ("chat",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_carries_stage_fields():
    line = json.loads(JsonFormatter().format(_record(
        task="structured-analysis", provider="chat", stage="transport", error_kind="timeout", request_id="abc123",
    )))
    assert line["message"] == "provider chat failed"
    assert line["level"] == "WARNING"
    assert line["logger"] == "app.insights"
    assert line["task"] == "structured-analysis"
    assert line["provider"] == "chat"
    assert line["stage"] == "transport"
    assert line["error_kind"] == "timeout"
    assert line["request_id"] == "abc123"


def test_absent_fields_are_omitted():
    line = json.loads(JsonFormatter().format(_record()))
    assert set(line) == {"level", "ts", "logger", "message"}
