# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Live terminal emulation for one active session."""

from __future__ import annotations

import codecs
import hashlib
import threading
import time
from typing import Any

from termreplay.constants import DEFAULT_COLS, DEFAULT_ENCODING, DEFAULT_ROWS
from termreplay.errors import ConcurrentWriterError, SessionEndedError
from termreplay.logging import get_logger
from termreplay.terminal.interpreter import EscapeInterpreter
from termreplay.terminal.screen import EraseCursorPolicy, ScreenBuffer

logger = get_logger(__name__)


class TerminalEmulator:
    """Screen state of one live session, fed chunk by chunk in arrival order.

    Exactly one writer may feed an emulator at a time. A historical replay and
    a live view of the same session must each use their own emulator.
    """

    def __init__(
        self,
        cols: int = DEFAULT_COLS,
        rows: int = DEFAULT_ROWS,
        erase_policy: EraseCursorPolicy | str = EraseCursorPolicy.KEEP,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        """Initialize terminal emulator.

        Args:
            cols: Terminal width in columns
            rows: Terminal height in rows
            erase_policy: Cursor behaviour after erase-entire-display
            encoding: Codec used when chunks arrive as bytes
        """
        self.cols = cols
        self.rows = rows
        self.encoding = encoding
        self._screen = ScreenBuffer(cols, rows, EraseCursorPolicy(erase_policy))
        self._interpreter = EscapeInterpreter(self._screen)
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._write_lock = threading.Lock()
        self._closed = False

    @property
    def screen(self) -> ScreenBuffer:
        return self._screen

    @property
    def closed(self) -> bool:
        return self._closed

    def process(self, data: str | bytes) -> None:
        """Process one chunk of session output.

        Args:
            data: Decoded text, or raw bytes decoded with the configured
                encoding (a character split across chunks is joined)

        Raises:
            SessionEndedError: If the session was already closed
            ConcurrentWriterError: If another writer is feeding this emulator
        """
        if self._closed:
            raise SessionEndedError("terminal session has ended")
        if not self._write_lock.acquire(blocking=False):
            raise ConcurrentWriterError("terminal already has an active writer")
        try:
            text = self._decoder.decode(data) if isinstance(data, bytes) else data
            self._interpreter.feed(text)
        finally:
            self._write_lock.release()

    def close(self) -> None:
        """Signal end of session. Any incomplete trailing sequence is dropped."""
        if self._closed:
            return
        with self._write_lock:
            tail = self._decoder.decode(b"", final=True)
            if tail:
                self._interpreter.feed(tail)
            if self._interpreter.pending:
                logger.debug("incomplete_sequence_dropped")
            self._interpreter.reset()
            self._closed = True

    def get_text(self) -> str:
        return self._screen.get_text()

    def get_snapshot(self) -> dict[str, Any]:
        """Get current screen state snapshot.

        Returns:
            Dictionary containing screen state:
                - screen: Screen text
                - screen_hash: SHA256 hash of screen text
                - cursor: Cursor position {x, y}
                - cols: Terminal columns
                - rows: Terminal rows
                - dirty_lines: Indices of lines changed since the last mark_clean()
                - captured_at: Unix timestamp when snapshot was captured
                - closed: True once the session has ended
        """
        screen_text = self._screen.get_text()
        screen_hash = hashlib.sha256(screen_text.encode("utf-8")).hexdigest()

        return {
            "screen": screen_text,
            "screen_hash": screen_hash,
            "cursor": {"x": self._screen.cursor.x, "y": self._screen.cursor.y},
            "cols": self.cols,
            "rows": self.rows,
            "dirty_lines": sorted(self._screen.get_dirty_lines()),
            "captured_at": time.time(),
            "closed": self._closed,
        }

    def mark_clean(self) -> None:
        self._screen.mark_clean()

    def reset(self) -> None:
        """Reset terminal to initial state."""
        self._interpreter.reset()
        self._decoder.reset()
        self._screen.reset()

    def resize(self, cols: int, rows: int) -> None:
        """Resize terminal.

        Args:
            cols: New terminal width
            rows: New terminal height
        """
        self.cols = cols
        self.rows = rows
        self._screen.resize(cols, rows)
        logger.debug("terminal_resized", cols=cols, rows=rows)
