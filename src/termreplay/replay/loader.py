# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Read persisted session log rows from JSONL files."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from termreplay.errors import LogFormatError
from termreplay.replay.models import LogRow


def load_log_rows(log_path: str | Path, session_id: str | None = None) -> list[LogRow]:
    """Load the log rows of one session.

    Each non-blank line holds one row object (``sequenceNumber``,
    ``timestamp``, ``isInput``, ``content``; snake_case also accepted). When
    ``session_id`` is given, rows tagged with a different ``session_id`` /
    ``sessionId`` are skipped.

    Raises:
        LogFormatError: If a line is not valid JSON or not a valid row
    """
    log_path = Path(log_path)
    rows: list[LogRow] = []
    for number, line in enumerate(log_path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise LogFormatError(f"invalid JSON: {e.msg}", line=number) from e
        if not isinstance(record, dict):
            raise LogFormatError("expected a JSON object", line=number)
        if session_id is not None:
            row_session = record.get("session_id", record.get("sessionId"))
            if row_session is not None and str(row_session) != session_id:
                continue
        try:
            rows.append(LogRow.model_validate(record))
        except ValidationError as e:
            raise LogFormatError(f"invalid log row: {e.error_count()} error(s)", line=number) from e
    return rows
