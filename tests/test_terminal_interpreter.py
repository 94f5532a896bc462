# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for the escape-sequence interpreter."""

from __future__ import annotations

import pytest

from termreplay.terminal.interpreter import EscapeInterpreter, ScreenListener, SessionStream
from termreplay.terminal.screen import EraseCursorPolicy, ScreenBuffer
from termreplay.terminal.styles import PenStyle


def _texts(screen: ScreenBuffer) -> list[str]:
    return [line.text for line in screen.lines]


class TestPrintableAndControls:
    def test_crlf_starts_new_line(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("hello\r\nworld")
        assert _texts(screen) == ["hello", "world", "", ""]
        assert (screen.cursor.x, screen.cursor.y) == (5, 1)

    def test_bare_linefeed_returns_to_column_zero(
        self, interpreter: EscapeInterpreter, screen: ScreenBuffer
    ) -> None:
        interpreter.feed("ab\ncd")
        assert _texts(screen)[:2] == ["ab", "cd"]

    def test_carriage_return_overwrites(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("12345\rab")
        assert screen.lines[0].text == "ab345"

    def test_backspace_erases(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("abc\x08")
        assert screen.lines[0].text == "ab "
        assert screen.cursor.x == 2

    def test_bell_and_nul_are_ignored(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("a\x07b\x00c")
        assert screen.lines[0].text == "abc"


class TestCursorSequences:
    def test_cursor_position(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[2;3Hx")
        assert screen.lines[1].text == "  x"
        assert (screen.cursor.x, screen.cursor.y) == (3, 1)

    def test_cursor_position_defaults_to_home(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[3;3H\x1b[Hx")
        assert screen.lines[0].text == "x"

    def test_cursor_position_clamps(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[99;99H")
        assert (screen.cursor.x, screen.cursor.y) == (9, 3)

    def test_relative_moves(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[2;2H\x1b[A\x1b[2C")
        assert (screen.cursor.x, screen.cursor.y) == (3, 0)
        interpreter.feed("\x1b[5D")
        assert screen.cursor.x == 0
        interpreter.feed("\x1b[0B")
        assert screen.cursor.y == 1

    def test_save_and_restore(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("ab\x1b[s\r\ncd\x1b[uX")
        assert _texts(screen)[:2] == ["abX", "cd"]

    def test_eight_bit_csi(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x9b2;2Hx")
        assert screen.lines[1].text == " x"


class TestErase:
    def test_erase_to_end_of_line(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("abcdef\x1b[3D\x1b[K")
        assert screen.lines[0].text == "abc"

    def test_erase_to_start_of_line(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("abcdef\x1b[3D\x1b[1K")
        assert screen.lines[0].text == "    ef"

    def test_erase_whole_line(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("abcdef\x1b[2K")
        assert screen.lines[0].text == ""
        assert screen.cursor.x == 6

    def test_clear_screen_keeps_cursor(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("junk\r\nmore\x1b[2Jhello")
        non_blank = [text for text in _texts(screen) if text.strip()]
        assert non_blank == ["    hello"]
        assert screen.lines[1].text == "    hello"

    def test_clear_screen_with_home_policy(self) -> None:
        screen = ScreenBuffer(10, 4, erase_policy=EraseCursorPolicy.HOME)
        EscapeInterpreter(screen).feed("junk\r\nmore\x1b[2Jhello")
        assert _texts(screen) == ["hello", "", "", ""]

    def test_unknown_erase_mode_is_ignored(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("abc\x1b[3J\x1b[9K")
        assert screen.lines[0].text == "abc"


class TestGraphicRendition:
    def test_sgr_sets_and_resets_pen(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[1;31mA\x1b[0mB")
        cells = screen.lines[0].cells
        assert cells[0].style == PenStyle(fg="red", bold=True)
        assert cells[1].style == PenStyle()

    def test_background_and_default_colors(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[32;44mA\x1b[39mB\x1b[49mC")
        cells = screen.lines[0].cells
        assert cells[0].style == PenStyle(fg="green", bg="blue")
        assert cells[1].style == PenStyle(bg="blue")
        assert cells[2].style == PenStyle()

    def test_empty_sgr_resets(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[4mA\x1b[mB")
        assert screen.lines[0].cells[1].style == PenStyle()


class TestSplitAndMalformedInput:
    def test_sequence_split_across_chunks(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[")
        interpreter.feed("31")
        interpreter.feed("mX")
        assert screen.lines[0].text == "X"
        assert screen.lines[0].cells[0].style == PenStyle(fg="red")

    def test_pending_while_sequence_incomplete(self, interpreter: EscapeInterpreter) -> None:
        interpreter.feed("ok\x1b[3")
        assert interpreter.pending
        interpreter.feed("C")
        assert not interpreter.pending

    def test_unknown_sequences_are_consumed(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("a\x1b[?25lb\x1b[5nc\x1b7d\x1b(Be")
        assert screen.lines[0].text == "abcde"

    def test_osc_title_never_reaches_screen(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b]0;router title\x07ok")
        interpreter.feed("\x1b]2;t\x1b\\!")
        assert screen.lines[0].text == "ok!"

    def test_oversized_parameter_has_no_effect(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[" + "1" * 100 + "mX")
        assert screen.lines[0].text == "X"
        assert screen.lines[0].cells[0].style == PenStyle()

    def test_cancel_aborts_sequence(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[31\x18X")
        assert screen.lines[0].text == "X"
        assert screen.lines[0].cells[0].style == PenStyle()

    def test_controls_inside_sequence_execute_in_place(
        self, interpreter: EscapeInterpreter, screen: ScreenBuffer
    ) -> None:
        interpreter.feed("ab\x1b[\r2Cx")
        assert screen.lines[0].text == "abx"

    def test_private_cursor_position_is_ignored(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("ab\x1b[?3;3Hc")
        assert screen.lines[0].text == "abc"

    def test_stray_c1_controls_never_reach_cells(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("a\x01\x85\x7fb")
        assert screen.lines[0].text == "ab"

    def test_non_ascii_digit_parameter_is_dropped(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[²m")
        assert not interpreter.pending
        interpreter.feed("ok")
        assert screen.lines[0].text == "ok"

    def test_reset_drops_partial_sequence(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("\x1b[2")
        interpreter.reset()
        interpreter.feed("J!")
        assert screen.lines[0].text == "J!"


class TestScreenListener:
    def test_accepts_every_stream_event(self, screen: ScreenBuffer) -> None:
        listener = ScreenListener(screen)
        for event in SessionStream.events:
            assert callable(getattr(listener, event))

    def test_unknown_attribute_raises(self, screen: ScreenBuffer) -> None:
        with pytest.raises(AttributeError):
            ScreenListener(screen).not_an_event

    def test_full_reset_clears_screen(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("junk\r\nmore\x1bcok")
        assert screen.get_text() == "ok\n\n\n"

    def test_index_and_next_line(self, interpreter: EscapeInterpreter, screen: ScreenBuffer) -> None:
        interpreter.feed("ab\x1bDc\x1bEd")
        assert screen.get_text() == "ab\n  c\nd\n"
