import io
import json
import logging

from querysnoop.core import log
from querysnoop.core.metrics import Timer, counter_value, force_emit, inc, observe_hist, reset, snapshot


def test_json_handler_writes_one_object_per_line():
    h = log.JsonHandler()
    h.stream = io.StringIO()
    lg = log.get("querysnoop.test.json")
    lg.addHandler(h)
    lg.setLevel(logging.INFO)
    try:
        lg.info("hello %s", "there")
    finally:
        lg.removeHandler(h)
    obj = json.loads(h.stream.getvalue().strip())
    assert obj["msg"] == "hello there"
    assert obj["lvl"] == "INFO"
    assert obj["name"] == "querysnoop.test.json"


def test_set_level_falls_back_to_info():
    log.set_level("not-a-level")
    assert logging.getLogger().level == logging.INFO
    log.set_level("warning")
    assert logging.getLogger().level == logging.WARNING
    log.set_level("INFO")


def test_counters_and_reset():
    inc("x_total", topic="a")
    inc("x_total", 2, topic="a")
    assert counter_value("x_total", topic="a") == 3
    assert counter_value("x_total", topic="b") == 0
    reset()
    assert counter_value("x_total", topic="a") == 0


def test_timer_and_snapshot():
    with Timer("work_ms", stage="t"):
        pass
    observe_hist("work_ms", 5.0, stage="t")
    hists = snapshot()["hists"]
    assert len(hists) == 1
    assert hists[0]["labels"] == {"stage": "t"}
    assert hists[0]["count"] == 2


def test_force_emit_logs_each_metric(caplog):
    inc("emit_total")
    observe_hist("emit_ms", 1.0)
    with caplog.at_level(logging.INFO, logger="metrics"):
        force_emit()
    text = " ".join(r.getMessage() for r in caplog.records if r.name == "metrics")
    assert "emit_total" in text and "emit_ms" in text
