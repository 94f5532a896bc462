# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for the live terminal emulator."""

from __future__ import annotations

import hashlib

import pyte
import pytest

from termreplay.errors import ConcurrentWriterError, SessionEndedError
from termreplay.terminal.emulator import TerminalEmulator


class TestProcessing:
    def test_processes_text_and_bytes(self) -> None:
        emulator = TerminalEmulator(cols=20, rows=3)
        emulator.process("hello ")
        emulator.process(b"world")
        assert emulator.get_text().split("\n")[0] == "hello world"

    def test_multibyte_character_split_across_chunks(self) -> None:
        emulator = TerminalEmulator(cols=20, rows=3)
        encoded = "café".encode()
        emulator.process(encoded[:4])
        emulator.process(encoded[4:])
        assert emulator.screen.lines[0].text == "café"

    def test_sequence_split_across_byte_chunks(self) -> None:
        emulator = TerminalEmulator(cols=20, rows=3)
        emulator.process(b"\x1b[1")
        emulator.process(b";32mOK")
        assert emulator.screen.lines[0].text == "OK"
        assert emulator.screen.lines[0].cells[0].style.fg == "green"

    def test_emulators_do_not_share_state(self) -> None:
        first = TerminalEmulator(cols=10, rows=2)
        second = TerminalEmulator(cols=10, rows=2)
        first.process("one")
        assert second.get_text() == "\n"


class TestLifecycle:
    def test_process_after_close_raises(self) -> None:
        emulator = TerminalEmulator()
        emulator.close()
        with pytest.raises(SessionEndedError):
            emulator.process("late")

    def test_close_is_idempotent(self) -> None:
        emulator = TerminalEmulator()
        emulator.close()
        emulator.close()
        assert emulator.closed

    def test_close_drops_incomplete_sequence(self) -> None:
        emulator = TerminalEmulator(cols=10, rows=2)
        emulator.process("ab\x1b[3")
        emulator.close()
        assert emulator.screen.lines[0].text == "ab"
        assert emulator.get_snapshot()["closed"] is True

    def test_close_flushes_truncated_character(self) -> None:
        emulator = TerminalEmulator(cols=10, rows=2)
        emulator.process(b"ok\xc3")
        emulator.close()
        assert emulator.screen.lines[0].text == "ok\ufffd"

    def test_second_writer_is_rejected(self) -> None:
        emulator = TerminalEmulator()
        emulator._write_lock.acquire()
        try:
            with pytest.raises(ConcurrentWriterError):
                emulator.process("x")
        finally:
            emulator._write_lock.release()
        emulator.process("x")
        assert emulator.screen.lines[0].text == "x"

    def test_reset_clears_screen(self) -> None:
        emulator = TerminalEmulator(cols=10, rows=2)
        emulator.process("abc\x1b[3")
        emulator.reset()
        emulator.process("1m")
        assert emulator.screen.lines[0].text == "1m"

    def test_full_width_line_then_crlf(self) -> None:
        emulator = TerminalEmulator(cols=10, rows=3)
        emulator.process("0123456789\r\nnext")
        assert emulator.get_text() == "0123456789\nnext\n"

    def test_resize(self) -> None:
        emulator = TerminalEmulator(cols=10, rows=4)
        emulator.process("a\r\nb\r\nc\r\nd")
        emulator.resize(5, 2)
        assert emulator.get_text() == "c\nd"
        assert (emulator.cols, emulator.rows) == (5, 2)


class TestSnapshot:
    def test_snapshot_fields(self) -> None:
        emulator = TerminalEmulator(cols=10, rows=3)
        emulator.process("abc\r\nde")
        snapshot = emulator.get_snapshot()

        assert snapshot["screen"] == "abc\nde\n"
        assert snapshot["screen_hash"] == hashlib.sha256(b"abc\nde\n").hexdigest()
        assert snapshot["cursor"] == {"x": 2, "y": 1}
        assert (snapshot["cols"], snapshot["rows"]) == (10, 3)
        assert snapshot["dirty_lines"] == [0, 1]
        assert snapshot["closed"] is False
        assert isinstance(snapshot["captured_at"], float)

    def test_dirty_lines_reset_by_mark_clean(self) -> None:
        emulator = TerminalEmulator(cols=10, rows=3)
        emulator.process("abc")
        emulator.mark_clean()
        assert emulator.get_snapshot()["dirty_lines"] == []
        emulator.process("\r\n\r\nz")
        assert emulator.get_snapshot()["dirty_lines"] == [2]


class TestPyteParity:
    """Plain text and basic cursor control render the same as pyte."""

    @pytest.mark.parametrize(
        "stream",
        [
            "hello world\r\nsecond line\r\n",
            "x" * 25 + "\r\nnext",
            "x" * 20 + "\r\nnext",
            "\x1b[1;31mred\x1b[0m plain\r\n\x1b[2;5Hmid",
            "abcdef\x1b[3D\x1b[K\r\nline",
            "ab\tc",
            "\x1b[3;1Hthird\x1b[1;1Hfirst",
            "one\r\ntwo\r\nthree\r\nfour\r\nfive\r\nsix",
            "junk\x1b[2Jok",
        ],
    )
    def test_display_matches(self, pyte_screen: pyte.Screen, pyte_stream: pyte.Stream, stream: str) -> None:
        emulator = TerminalEmulator(cols=pyte_screen.columns, rows=pyte_screen.lines)
        emulator.process(stream)
        pyte_stream.feed(stream)

        expected = [line.rstrip() for line in pyte_screen.display]
        assert [line.rstrip() for line in emulator.screen.display] == expected
