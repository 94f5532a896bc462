# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Control-sequence interpreter for the live screen buffer.

Parsing is done by :class:`pyte.Stream`; the events it emits are applied to a
:class:`ScreenBuffer` by :class:`ScreenListener`. The stream keeps its parser
state between :meth:`EscapeInterpreter.feed` calls, so a sequence split across
two chunks is applied once its final character arrives.
"""

from __future__ import annotations

from typing import Any

import pyte

from termreplay.logging import get_logger
from termreplay.terminal.screen import EraseMode, ScreenBuffer
from termreplay.terminal.styles import apply_sgr

logger = get_logger(__name__)

_ERASE_MODES = frozenset(mode.value for mode in EraseMode)


def _is_printable(char: str) -> bool:
    return char >= " " and not ("\x7f" <= char <= "\x9f")


class SessionStream(pyte.Stream):
    """pyte stream that also maps ``CSI s`` / ``CSI u`` to cursor save and restore."""

    csi = {**pyte.Stream.csi, "s": "save_cursor", "u": "restore_cursor"}


class ScreenListener:
    """Applies pyte stream events to a :class:`ScreenBuffer`.

    Only the events the session recorder needs are handled; every other event
    pyte knows about is accepted and ignored.
    """

    def __init__(self, screen: ScreenBuffer) -> None:
        self.screen = screen

    def __getattr__(self, name: str) -> Any:
        if name in pyte.Stream.events:
            return self.debug
        raise AttributeError(name)

    def debug(self, *args: Any, **kwargs: Any) -> None:
        pass

    def draw(self, data: str) -> None:
        for char in data:
            if _is_printable(char):
                self.screen.write(char)

    def linefeed(self) -> None:
        self.screen.linefeed()

    def index(self) -> None:
        self.screen.index()

    def carriage_return(self) -> None:
        self.screen.carriage_return()

    def backspace(self) -> None:
        self.screen.backspace()

    def tab(self) -> None:
        self.screen.tab()

    def reset(self) -> None:
        self.screen.reset()

    # Cursor movement. Counts of 0 mean 1 and every move clamps.

    def cursor_up(self, count: int = 0, *_: int, private: bool = False) -> None:
        self.screen.move_cursor_by(dy=-(count or 1))

    def cursor_down(self, count: int = 0, *_: int, private: bool = False) -> None:
        self.screen.move_cursor_by(dy=count or 1)

    def cursor_forward(self, count: int = 0, *_: int, private: bool = False) -> None:
        self.screen.move_cursor_by(dx=count or 1)

    def cursor_back(self, count: int = 0, *_: int, private: bool = False) -> None:
        self.screen.move_cursor_by(dx=-(count or 1))

    def cursor_down1(self, count: int = 0, *_: int, private: bool = False) -> None:
        self.cursor_down(count)
        self.screen.carriage_return()

    def cursor_up1(self, count: int = 0, *_: int, private: bool = False) -> None:
        self.cursor_up(count)
        self.screen.carriage_return()

    def cursor_position(self, line: int = 0, column: int = 0, *_: int, private: bool = False) -> None:
        if private:
            return
        self.screen.move_cursor_to((column or 1) - 1, (line or 1) - 1)

    def cursor_to_column(self, column: int = 0, *_: int, private: bool = False) -> None:
        self.screen.move_cursor_to((column or 1) - 1, self.screen.cursor.y)

    def cursor_to_line(self, line: int = 0, *_: int, private: bool = False) -> None:
        self.screen.move_cursor_to(self.screen.cursor.x, (line or 1) - 1)

    def save_cursor(self, *_: int, private: bool = False) -> None:
        self.screen.save_cursor()

    def restore_cursor(self, *_: int, private: bool = False) -> None:
        self.screen.restore_cursor()

    # Erasing and rendition

    def erase_in_display(self, how: int = 0, *_: int, private: bool = False) -> None:
        if how in _ERASE_MODES:
            self.screen.clear_screen(how)

    def erase_in_line(self, how: int = 0, *_: int, private: bool = False) -> None:
        if how in _ERASE_MODES:
            self.screen.clear_line(self.screen.cursor.y, how)

    def select_graphic_rendition(self, *attrs: int, private: bool = False) -> None:
        if private:
            return
        self.screen.pen = apply_sgr(self.screen.pen, attrs)


class EscapeInterpreter:
    """Feeds text through a pyte stream into a screen buffer. Never raises on input."""

    def __init__(self, screen: ScreenBuffer) -> None:
        self.screen = screen
        self._listener = ScreenListener(screen)
        self._stream = SessionStream(self._listener)

    @property
    def pending(self) -> bool:
        """True while a sequence has started but not yet completed."""
        return not self._stream._taking_plain_text

    def reset(self) -> None:
        """Drop any partially received sequence."""
        self._stream = SessionStream(self._listener)

    def feed(self, chunk: str) -> ScreenBuffer:
        try:
            self._stream.feed(chunk)
        except ValueError:
            # pyte accepts any Unicode digit as a parameter but int() does not
            logger.warning("malformed_sequence_dropped", chunk_length=len(chunk))
        return self.screen
