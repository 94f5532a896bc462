# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal emulation layer (live path)."""

from __future__ import annotations

from termreplay.terminal.emulator import TerminalEmulator
from termreplay.terminal.interpreter import EscapeInterpreter, ScreenListener, SessionStream
from termreplay.terminal.recorder import FramePolicy, FrameRecorder, LiveFrame
from termreplay.terminal.screen import (
    Cell,
    EraseCursorPolicy,
    EraseMode,
    Line,
    ScreenBuffer,
)
from termreplay.terminal.sequences import clean_for_display, plain_text, strip_ansi_codes
from termreplay.terminal.styles import DEFAULT_STYLE, PenStyle, apply_sgr

__all__ = [
    "Cell",
    "DEFAULT_STYLE",
    "EraseCursorPolicy",
    "EraseMode",
    "EscapeInterpreter",
    "FramePolicy",
    "FrameRecorder",
    "Line",
    "LiveFrame",
    "PenStyle",
    "ScreenBuffer",
    "ScreenListener",
    "SessionStream",
    "TerminalEmulator",
    "apply_sgr",
    "clean_for_display",
    "plain_text",
    "strip_ansi_codes",
]
