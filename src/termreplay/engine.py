# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Facade over the live terminal and offline replay pipelines.

The two pipelines share escape-sequence semantics but no state: every live
view gets its own emulator and every parse runs over its own row list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from termreplay.replay.aggregate import summarize
from termreplay.replay.models import LogRow, ParsedSession, SessionSummary
from termreplay.replay.policy import SegmentationPolicy
from termreplay.replay.segmenter import FrameSegmenter
from termreplay.settings import Settings
from termreplay.terminal.emulator import TerminalEmulator
from termreplay.terminal.recorder import FrameRecorder


class ReplayEngine:
    """Entry point for callers that need both live screens and session replays."""

    def __init__(self, settings: Settings | None = None, policy: SegmentationPolicy | None = None) -> None:
        self.settings = settings or Settings()
        self.policy = policy or SegmentationPolicy.from_settings(self.settings)
        self._segmenter = FrameSegmenter(self.policy)

    def live(self, cols: int | None = None, rows: int | None = None) -> TerminalEmulator:
        """Create a new, independent emulator for one live session."""
        return TerminalEmulator(
            cols=cols or self.settings.cols,
            rows=rows or self.settings.rows,
            erase_policy=self.settings.erase_cursor_policy,
            encoding=self.settings.encoding,
        )

    def parse(self, rows: Iterable[LogRow | Mapping[str, Any]]) -> ParsedSession:
        """Reconstruct the frames of one finished or reconnectable session."""
        return self._segmenter.parse(rows)

    def summarize(self, session: ParsedSession) -> SessionSummary:
        return summarize(session.frames)

    def record(self, cols: int | None = None, rows: int | None = None) -> FrameRecorder:
        """Create a frame recorder over a new emulator, using this engine's prompt and noise rules."""
        return FrameRecorder(self.live(cols, rows), self.policy)
