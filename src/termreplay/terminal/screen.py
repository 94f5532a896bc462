# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Virtual screen buffer for live sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from termreplay.constants import TAB_WIDTH
from termreplay.terminal.styles import DEFAULT_STYLE, PenStyle


class EraseMode(int, Enum):
    """Extent of an erase-in-line / erase-in-display operation."""

    TO_END = 0
    TO_START = 1
    ALL = 2


class EraseCursorPolicy(str, Enum):
    """Where the cursor goes after an erase operation.

    KEEP leaves the cursor untouched after every erase. HOME additionally moves
    it to (0, 0) after the entire display is erased.
    """

    KEEP = "keep"
    HOME = "home"


@dataclass(frozen=True)
class Cell:
    char: str = " "
    style: PenStyle = DEFAULT_STYLE


BLANK = Cell()


@dataclass
class Line:
    """One screen row; cells are only allocated up to the last written column."""

    cells: list[Cell] = field(default_factory=list)
    dirty: bool = False

    @property
    def text(self) -> str:
        return "".join(cell.char for cell in self.cells)

    def style_spans(self) -> list[tuple[int, int, PenStyle]]:
        """Return ``(start, end, style)`` runs of non-default style."""
        spans: list[tuple[int, int, PenStyle]] = []
        start = 0
        for index in range(1, len(self.cells) + 1):
            if index < len(self.cells) and self.cells[index].style == self.cells[start].style:
                continue
            style = self.cells[start].style
            if not style.is_default:
                spans.append((start, index, style))
            start = index
        return spans


@dataclass
class Cursor:
    x: int = 0
    y: int = 0


class ScreenBuffer:
    """Fixed-size grid of styled cells with cursor, wrapping and scrolling.

    Every operation clamps: the cursor always satisfies ``0 <= x < width`` and
    ``0 <= y < height`` and the buffer always holds exactly ``height`` lines.
    """

    def __init__(
        self,
        width: int,
        height: int,
        erase_policy: EraseCursorPolicy = EraseCursorPolicy.KEEP,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"screen must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.erase_policy = EraseCursorPolicy(erase_policy)
        self.lines: list[Line] = [Line() for _ in range(height)]
        self.cursor = Cursor()
        self.pen = DEFAULT_STYLE
        self._saved_cursor = Cursor()
        self._wrap_pending = False

    @property
    def dirty(self) -> bool:
        return any(line.dirty for line in self.lines)

    # Cell access

    def set_char_at(self, x: int, y: int, char: str) -> None:
        """Store ``char`` at (x, y) with the current pen, extending the line with blanks."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        line = self.lines[y]
        if len(line.cells) <= x:
            line.cells.extend([BLANK] * (x + 1 - len(line.cells)))
        line.cells[x] = Cell(char, self.pen)
        line.dirty = True

    @property
    def wrap_pending(self) -> bool:
        """True when the last column was just written and the next write wraps."""
        return self._wrap_pending

    def write(self, char: str) -> None:
        """Write at the cursor and advance.

        Writing the last column leaves the cursor there with a wrap pending;
        the wrap to the next row happens on the following write, so a CR/LF
        right after a full-width line does not produce an empty row.
        """
        if self._wrap_pending:
            self.linefeed()
        self.set_char_at(self.cursor.x, self.cursor.y, char)
        if self.cursor.x + 1 >= self.width:
            self._wrap_pending = True
        else:
            self.cursor.x += 1

    # Cursor movement

    def move_cursor_to(self, x: int, y: int) -> None:
        self._wrap_pending = False
        self.cursor.x = min(max(x, 0), self.width - 1)
        self.cursor.y = min(max(y, 0), self.height - 1)

    def move_cursor_by(self, dx: int = 0, dy: int = 0) -> None:
        self.move_cursor_to(self.cursor.x + dx, self.cursor.y + dy)

    def carriage_return(self) -> None:
        self._wrap_pending = False
        self.cursor.x = 0

    def index(self) -> None:
        """Move down one row keeping the column, scrolling past the last row."""
        self._wrap_pending = False
        if self.cursor.y + 1 >= self.height:
            self.scroll_up()
            self.cursor.y = self.height - 1
        else:
            self.cursor.y += 1

    def linefeed(self) -> None:
        """Move to column 0 of the next row, scrolling past the last row."""
        self.carriage_return()
        self.index()

    def backspace(self) -> None:
        """Move left one column and blank the cell there."""
        self._wrap_pending = False
        if self.cursor.x == 0:
            return
        self.cursor.x -= 1
        line = self.lines[self.cursor.y]
        if self.cursor.x < len(line.cells):
            line.cells[self.cursor.x] = BLANK
            line.dirty = True

    def tab(self) -> None:
        """Advance to the next tab stop.

        Skipped cells are not written: cells already on the line keep their
        content and the line is only padded with blanks up to the stop.
        """
        self._wrap_pending = False
        target = min((self.cursor.x // TAB_WIDTH + 1) * TAB_WIDTH, self.width - 1)
        line = self.lines[self.cursor.y]
        if len(line.cells) < target:
            line.cells.extend([BLANK] * (target - len(line.cells)))
            line.dirty = True
        self.cursor.x = target

    def save_cursor(self) -> None:
        self._saved_cursor = Cursor(self.cursor.x, self.cursor.y)

    def restore_cursor(self) -> None:
        self.move_cursor_to(self._saved_cursor.x, self._saved_cursor.y)

    # Erasing and scrolling

    def clear_line(self, y: int, mode: EraseMode | int = EraseMode.TO_END) -> None:
        """Erase part of line ``y`` relative to the cursor column."""
        if not 0 <= y < self.height:
            return
        line = self.lines[y]
        mode = EraseMode(mode)
        if mode is EraseMode.TO_END:
            del line.cells[self.cursor.x :]
        elif mode is EraseMode.TO_START:
            end = min(self.cursor.x + 1, len(line.cells))
            line.cells[:end] = [BLANK] * end
        else:
            line.cells.clear()
        line.dirty = True

    def clear_screen(self, mode: EraseMode | int = EraseMode.TO_END) -> None:
        """Erase part of the display relative to the cursor.

        The cursor is left in place unless the policy is HOME and the whole
        display was erased.
        """
        mode = EraseMode(mode)
        y = self.cursor.y
        if mode is EraseMode.TO_END:
            self.clear_line(y, EraseMode.TO_END)
            rows = range(y + 1, self.height)
        elif mode is EraseMode.TO_START:
            self.clear_line(y, EraseMode.TO_START)
            rows = range(0, y)
        else:
            rows = range(self.height)
        for row in rows:
            self.clear_line(row, EraseMode.ALL)
        if mode is EraseMode.ALL and self.erase_policy is EraseCursorPolicy.HOME:
            self.move_cursor_to(0, 0)

    def scroll_up(self) -> None:
        """Drop the top line and append a blank line at the bottom."""
        del self.lines[0]
        self.lines.append(Line())
        for line in self.lines:
            line.dirty = True

    # Snapshots

    def get_dirty_lines(self) -> dict[int, Line]:
        return {index: line for index, line in enumerate(self.lines) if line.dirty}

    def mark_clean(self) -> None:
        for line in self.lines:
            line.dirty = False

    def get_text(self) -> str:
        """Newline-joined snapshot of the screen content."""
        return "\n".join(line.text for line in self.lines)

    @property
    def display(self) -> list[str]:
        """Screen lines padded to the full width."""
        return [line.text.ljust(self.width) for line in self.lines]

    def reset(self) -> None:
        self.lines = [Line(dirty=True) for _ in range(self.height)]
        self.cursor = Cursor()
        self._saved_cursor = Cursor()
        self._wrap_pending = False
        self.pen = DEFAULT_STYLE

    def resize(self, width: int, height: int) -> None:
        """Resize the grid; shrinking drops lines from the top and cells from the right."""
        if width < 1 or height < 1:
            raise ValueError(f"screen must be at least 1x1, got {width}x{height}")
        if height < self.height:
            dropped = self.height - height
            del self.lines[:dropped]
            self.cursor.y -= dropped
        else:
            self.lines.extend(Line() for _ in range(height - self.height))
        for line in self.lines:
            del line.cells[width:]
            line.dirty = True
        self.width = width
        self.height = height
        self.move_cursor_to(self.cursor.x, self.cursor.y)
