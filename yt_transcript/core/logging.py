# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Logging for the extraction chain: rich console output plus optional JSONL."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "yt_transcript"

# Structured fields carried on records via ``extra=``.
EVENT_FIELDS = ("video_id", "strategy", "event", "details", "error")

# Libraries that log every request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "googleapiclient.discovery_cache")

_console = Console(stderr=True)


class JsonlFormatter(logging.Formatter):
    """One JSON object per record, with the chain's event fields always present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
        }
        for field in EVENT_FIELDS:
            entry[field] = getattr(record, field, None)
        message = record.getMessage()
        if message:
            entry["message"] = message
        if record.exc_info:
            entry["traceback"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class JsonlFileHandler(logging.FileHandler):
    """Append-mode file handler preconfigured with JsonlFormatter."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(str(path), mode="a", encoding="utf-8")
        self.setFormatter(JsonlFormatter())


def setup_logging(*, verbose: bool = False, jsonl_path: Path | None = None) -> logging.Logger:
    """(Re)configure the package logger and return it.

    Calling it again replaces the previous handlers, so the CLI and the
    HTTP service can both call it on startup.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)

    console = RichHandler(
        console=_console,
        level=level,
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    logger.addHandler(console)

    if jsonl_path is not None:
        jsonl = JsonlFileHandler(jsonl_path)
        jsonl.setLevel(logging.DEBUG)
        logger.addHandler(jsonl)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def log_event(level: int, message: str, **fields: str | None) -> None:
    """Log ``message`` with any of EVENT_FIELDS attached as record attributes."""
    unknown = set(fields) - set(EVENT_FIELDS)
    if unknown:
        raise TypeError(f"unknown log fields: {', '.join(sorted(unknown))}")
    get_logger().log(level, message, extra={name: fields.get(name) for name in EVENT_FIELDS})


def log_attempt(video_id: str, attempt) -> None:
    """Log one strategy attempt from the extraction chain.

    Successes and partials log at INFO, skips at DEBUG, the rest at WARNING.
    """
    if attempt.outcome in ("success", "partial"):
        level = logging.INFO
    elif attempt.outcome == "skipped":
        level = logging.DEBUG
    else:
        level = logging.WARNING
    message = f"{attempt.strategy}: {attempt.outcome}"
    if attempt.reason:
        message += f" ({attempt.reason})"
    log_event(
        level,
        message,
        video_id=video_id,
        strategy=attempt.strategy,
        event=f"strategy_{attempt.outcome}",
        details=f"{attempt.elapsed:.2f}s",
        error=attempt.reason if level == logging.WARNING else None,
    )
