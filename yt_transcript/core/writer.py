"""Atomic output writing for the CLI (transcript text or full response JSON)."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from yt_transcript.core.models import TranscriptResponse


def write_response(response: TranscriptResponse, dest: Path, *, as_json: bool = False) -> Path:
    """Write the transcript text, or the wire JSON when as_json is set.

    Returns the written file path.
    """
    dest = Path(dest)
    if as_json:
        content = json.dumps(response.to_wire(), indent=2, ensure_ascii=False)
    else:
        content = response.transcript
    if not content.endswith("\n"):
        content += "\n"
    _atomic_write(dest, content)
    return dest


def _atomic_write(dest: Path, content: str) -> None:
    """Write to a sibling temp file and rename it over dest.

    Readers see either the old file or the complete new one.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=dest.parent, prefix=".yt_transcript_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_path, dest)
    except BaseException:
        os.unlink(tmp_path)
        raise
