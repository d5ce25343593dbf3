# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for yt_transcript.core.logging."""

import json
import logging

import pytest

from yt_transcript.core.logging import (
    JsonlFormatter,
    get_logger,
    log_attempt,
    log_event,
    setup_logging,
)
from yt_transcript.core.models import ExtractionAttempt


def _records(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestSetupLogging:
    def test_returns_logger(self):
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "yt_transcript"

    def test_info_level_by_default(self):
        assert setup_logging(verbose=False).level == logging.INFO

    def test_debug_level_when_verbose(self):
        assert setup_logging(verbose=True).level == logging.DEBUG

    def test_clears_existing_handlers(self):
        count1 = len(setup_logging().handlers)
        count2 = len(setup_logging().handlers)
        assert count1 == count2

    def test_jsonl_handler_added(self, tmp_path):
        logger = setup_logging(jsonl_path=tmp_path / "logs" / "test.jsonl")
        handler_types = [type(h).__name__ for h in logger.handlers]
        assert "JsonlFileHandler" in handler_types


class TestJsonlFormatter:
    def test_format_with_extras(self):
        formatter = JsonlFormatter()
        record = logging.LogRecord(
            name="yt_transcript", level=logging.WARNING, pathname="", lineno=0,
            msg="fail", args=(), exc_info=None,
        )
        record.video_id = "abc12345678"
        record.strategy = "watch-page-scraping"
        record.event = "strategy_failed"
        record.error = "timeout"
        data = json.loads(formatter.format(record))
        assert data["message"] == "fail"
        assert data["level"] == "WARNING"
        assert data["video_id"] == "abc12345678"
        assert data["strategy"] == "watch-page-scraping"
        assert data["event"] == "strategy_failed"
        assert data["error"] == "timeout"
        assert "timestamp" in data


class TestGetLogger:
    def test_returns_same_logger(self):
        setup_logging()
        assert get_logger().name == "yt_transcript"


class TestLogEvent:
    def test_log_event(self, tmp_path):
        path = tmp_path / "events.jsonl"
        setup_logging(jsonl_path=path)
        log_event(logging.INFO, "fetched", video_id="abc12345678", strategy="caption-library")
        data = _records(path)[0]
        assert data["message"] == "fetched"
        assert data["video_id"] == "abc12345678"
        assert data["strategy"] == "caption-library"

    def test_traceback_recorded(self, tmp_path):
        path = tmp_path / "events.jsonl"
        logger = setup_logging(jsonl_path=path)
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logger.exception("strategy crashed")
        data = _records(path)[0]
        assert "RuntimeError: boom" in data["traceback"]
        assert data["strategy"] is None

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="unknown log fields"):
            log_event(logging.INFO, "x", attempt="1")


class TestLogAttempt:
    @pytest.mark.parametrize(
        "outcome, level",
        [
            ("success", "INFO"),
            ("partial", "INFO"),
            ("no_result", "WARNING"),
            ("failed", "WARNING"),
            ("skipped", "DEBUG"),
        ],
    )
    def test_levels(self, tmp_path, outcome, level):
        path = tmp_path / "attempts.jsonl"
        setup_logging(verbose=True, jsonl_path=path)
        log_attempt("dQw4w9WgXcQ", ExtractionAttempt(strategy="s", outcome=outcome, elapsed=0.5))
        data = _records(path)[0]
        assert data["level"] == level
        assert data["event"] == f"strategy_{outcome}"
        assert data["strategy"] == "s"
        assert data["details"] == "0.50s"

    def test_failure_reason_recorded(self, tmp_path):
        path = tmp_path / "attempts.jsonl"
        setup_logging(jsonl_path=path)
        log_attempt(
            "dQw4w9WgXcQ",
            ExtractionAttempt(strategy="s", outcome="failed", reason="timed out after 45s"),
        )
        data = _records(path)[0]
        assert data["error"] == "timed out after 45s"
        assert data["message"] == "s: failed (timed out after 45s)"


class TestChattyLoggers:
    def test_httpx_quieted(self):
        setup_logging()
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_httpx_verbose(self):
        setup_logging(verbose=True)
        assert logging.getLogger("httpx").level == logging.DEBUG
