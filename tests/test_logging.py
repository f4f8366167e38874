"""Tests for the structured database logger."""

import json
import logging

from dbterm.database.logging import QueryTimer, hash_query, log_query_execution, log_transaction, sanitize_dsn


def test_sanitize_dsn_masks_credentials():
    assert sanitize_dsn("postgres://admin:s3cret@db:5432/app") == "postgres://***:***@db:5432/app"
    assert sanitize_dsn("sqlite:///data.db") == "sqlite:///data.db"


def test_hash_query_is_stable():
    assert hash_query("SELECT 1") == hash_query("SELECT 1")
    assert hash_query("SELECT 1") != hash_query("SELECT 2")
    assert len(hash_query("SELECT 1")) == 16


def test_query_event_is_json(caplog):
    with caplog.at_level(logging.INFO, logger="dbterm.database"):
        log_query_execution("SELECT 1", "mysql://root:pw@localhost/mysql", success=True, row_count=1)

    event = json.loads(caplog.records[-1].getMessage())
    assert event["event"] == "query_execution"
    assert event["row_count"] == 1
    assert "pw" not in event["dsn"]


def test_abandoned_transaction_logs_warning(caplog):
    with caplog.at_level(logging.INFO, logger="dbterm.database"):
        log_transaction("sqlite:///x.db", "abandoned", success=True)
    assert caplog.records[-1].levelno == logging.WARNING


def test_query_timer():
    with QueryTimer() as timer:
        pass
    assert timer.duration >= 0.0
