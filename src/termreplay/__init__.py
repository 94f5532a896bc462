# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal emulation and session-replay engine for network device CLI sessions."""

from __future__ import annotations

from termreplay.engine import ReplayEngine
from termreplay.replay import (
    CommandContext,
    DialectMatch,
    Frame,
    FrameSegmenter,
    LogRow,
    ParsedSession,
    SessionSummary,
    TimelineEntry,
    parse_session,
)
from termreplay.settings import Settings
from termreplay.terminal import FrameRecorder, LiveFrame, ScreenBuffer, TerminalEmulator

__all__ = [
    "CommandContext",
    "DialectMatch",
    "Frame",
    "FrameRecorder",
    "FrameSegmenter",
    "LiveFrame",
    "LogRow",
    "ParsedSession",
    "ReplayEngine",
    "ScreenBuffer",
    "SessionSummary",
    "Settings",
    "TerminalEmulator",
    "TimelineEntry",
    "parse_session",
]
