# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for pen styles and SGR parameter handling."""

from __future__ import annotations

import pytest

from termreplay.terminal.styles import DEFAULT_STYLE, PenStyle, apply_sgr, parse_params


class TestParseParams:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", []),
            ("1", [1]),
            ("1;31", [1, 31]),
            ("1;;3", [1, None, 3]),
            ("?25", [25]),
            ("38:5:208", [38, 5, 208]),
        ],
    )
    def test_parse(self, raw: str, expected: list[int | None]) -> None:
        assert parse_params(raw) == expected


class TestApplySgr:
    def test_attributes_and_cancels(self) -> None:
        style = apply_sgr(DEFAULT_STYLE, [1, 3, 4])
        assert style == PenStyle(bold=True, italic=True, underline=True)
        assert apply_sgr(style, [22, 23, 24]) == DEFAULT_STYLE

    def test_reset_variants(self) -> None:
        style = PenStyle(fg="red", bold=True)
        assert apply_sgr(style, [0]) == DEFAULT_STYLE
        assert apply_sgr(style, []) == DEFAULT_STYLE
        assert apply_sgr(style, [None]) == DEFAULT_STYLE

    def test_basic_colors(self) -> None:
        style = apply_sgr(DEFAULT_STYLE, [33, 46])
        assert style.fg == "brown"
        assert style.bg == "cyan"
        assert apply_sgr(style, [39, 49]) == DEFAULT_STYLE

    def test_extended_colors_do_not_leak_into_attributes(self) -> None:
        assert apply_sgr(DEFAULT_STYLE, [38, 5, 1]) == DEFAULT_STYLE
        assert apply_sgr(DEFAULT_STYLE, [48, 2, 1, 2, 3, 4]) == PenStyle(underline=True)

    def test_unknown_codes_ignored(self) -> None:
        assert apply_sgr(DEFAULT_STYLE, [5, 7, 90]) == DEFAULT_STYLE


class TestCss:
    def test_default_style_has_no_rules(self) -> None:
        assert DEFAULT_STYLE.is_default
        assert DEFAULT_STYLE.css() == ""

    def test_combined_rules(self) -> None:
        style = PenStyle(fg="green", bg="black", bold=True, underline=True)
        assert style.css() == (
            "color: #0dbc79; background-color: #000000; font-weight: bold; text-decoration: underline"
        )

    def test_yellow_and_brown_render_alike(self) -> None:
        assert PenStyle(fg="brown").css() == PenStyle(fg="yellow").css()
