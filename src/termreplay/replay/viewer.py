# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Timed terminal playback of a parsed session."""

from __future__ import annotations

import time
from collections.abc import Callable

from termreplay.replay.aggregate import format_timestamp
from termreplay.replay.models import Frame, ParsedSession


def _render_frame(frame: Frame) -> str:
    stamp = format_timestamp(frame.timestamp)
    if frame.is_command and frame.command_context is not None:
        return f"[{stamp}] $ {frame.command_context.command}"
    content = frame.cleaned_content or frame.raw_content
    return f"[{stamp}] {content}\x1b[0m"


def replay_session(
    session: ParsedSession,
    *,
    speed: float = 1.0,
    step: bool = False,
    echo: Callable[[str], None] = print,
    prompt: Callable[[str], object] = input,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Print frames with their recorded spacing.

    Args:
        session: Parsed session to play back
        speed: Playback speed multiplier
        step: Wait for a keypress between frames instead of sleeping
        echo: Output function
        prompt: Keypress function used in step mode
        sleep: Delay function

    Returns:
        Number of frames shown
    """
    last_ts: int | None = None
    shown = 0
    for frame in session.frames:
        if last_ts is not None and not step:
            delta = (frame.timestamp - last_ts) / 1000 / max(speed, 0.01)
            if delta > 0:
                sleep(delta)
        echo(_render_frame(frame))
        shown += 1
        if step:
            prompt("-- next --")
        last_ts = frame.timestamp
    return shown
