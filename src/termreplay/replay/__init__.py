# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Offline replay layer: frames, commands, highlighting and summaries."""

from __future__ import annotations

from termreplay.replay.aggregate import command_timeline, format_timestamp, summarize
from termreplay.replay.dialect import ROUTEROS_DIALECT, CommandRecognizer, DialectTable
from termreplay.replay.highlight import StyleRenderer
from termreplay.replay.loader import load_log_rows
from termreplay.replay.models import (
    CommandContext,
    DialectMatch,
    Frame,
    LogRow,
    ParsedSession,
    SessionSummary,
    TimelineEntry,
)
from termreplay.replay.policy import ROUTEROS_POLICY, SegmentationPolicy
from termreplay.replay.segmenter import FrameSegmenter, merge_frames, parse_session
from termreplay.replay.viewer import replay_session

__all__ = [
    "CommandContext",
    "CommandRecognizer",
    "DialectMatch",
    "DialectTable",
    "Frame",
    "FrameSegmenter",
    "LogRow",
    "ParsedSession",
    "ROUTEROS_DIALECT",
    "ROUTEROS_POLICY",
    "SegmentationPolicy",
    "SessionSummary",
    "StyleRenderer",
    "TimelineEntry",
    "command_timeline",
    "format_timestamp",
    "load_log_rows",
    "merge_frames",
    "parse_session",
    "replay_session",
    "summarize",
]
