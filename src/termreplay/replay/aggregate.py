# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Summary statistics and command timelines for parsed sessions."""

from __future__ import annotations

from collections.abc import Sequence

from termreplay.replay.models import Frame, SessionSummary, TimelineEntry


def command_timeline(frames: Sequence[Frame]) -> list[TimelineEntry]:
    """One entry per command frame, timed until the frame that follows it."""
    entries: list[TimelineEntry] = []
    for index, frame in enumerate(frames):
        context = frame.command_context
        if context is None or not context.is_command or not context.command:
            continue
        following = frames[index + 1] if index + 1 < len(frames) else None
        dialect = context.dialect
        entries.append(
            TimelineEntry(
                command=context.command,
                timestamp=frame.timestamp,
                duration_until_next_frame=following.timestamp - frame.timestamp if following else None,
                is_dialect_command=bool(dialect and dialect.is_dialect_command),
                category=dialect.category if dialect else None,
            )
        )
    return entries


def summarize(frames: Sequence[Frame]) -> SessionSummary:
    """Reduce a frame list to totals and a command timeline."""
    timeline = command_timeline(frames)
    return SessionSummary(
        total_duration=max((frame.timestamp for frame in frames), default=0),
        command_count=len(timeline),
        dialect_command_count=sum(1 for entry in timeline if entry.is_dialect_command),
        timeline=tuple(timeline),
    )


def format_timestamp(ms: int) -> str:
    """Format a relative timestamp as ``m:ss`` or ``h:mm:ss``."""
    seconds = max(ms, 0) // 1000
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
