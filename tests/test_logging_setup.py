from __future__ import annotations

import logging

from utils.logging_setup import SafeExtraFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("candidates", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_fills_missing_extras(monkeypatch):
    monkeypatch.setenv("RUN_ID", "run-42")
    formatter = SafeExtraFormatter(fmt="%(message)s step=%(step)s member_id=%(member_id)s run_id=%(run_id)s")
    assert formatter.format(_record()) == "hello step=- member_id=- run_id=run-42"
    assert formatter.format(_record(step="extract", member_id="m1", run_id="r1")) == "hello step=extract member_id=m1 run_id=r1"
