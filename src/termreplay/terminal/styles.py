# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pen styles and SGR (Select Graphic Rendition) semantics.

Both the live screen buffer and the offline markup renderer apply SGR
parameters through :func:`apply_sgr`, so a color means the same thing on
either path.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from pyte import graphics

# Hex values used when a pen style is rendered as inline CSS.
# pyte names SGR 33/43 "brown"; "yellow" is accepted as an alias.
CSS_COLORS: dict[str, str] = {
    "black": "#000000",
    "red": "#cd3131",
    "green": "#0dbc79",
    "brown": "#e5e510",
    "yellow": "#e5e510",
    "blue": "#2472c8",
    "magenta": "#bc3fbc",
    "cyan": "#11a8cd",
    "white": "#e5e5e5",
}

_BASIC_FG = {code: name for code, name in graphics.FG_ANSI.items() if 30 <= code <= 37}
_BASIC_BG = {code: name for code, name in graphics.BG_ANSI.items() if 40 <= code <= 47}
_DEFAULT_FG = 39
_DEFAULT_BG = 49


@dataclass(frozen=True)
class PenStyle:
    """Attributes applied to characters written after the last SGR sequence."""

    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False

    @property
    def is_default(self) -> bool:
        return self == DEFAULT_STYLE

    def css(self) -> str:
        """Render the style as an inline CSS declaration list."""
        rules: list[str] = []
        if self.fg is not None:
            rules.append(f"color: {CSS_COLORS.get(self.fg, '#ffffff')}")
        if self.bg is not None:
            rules.append(f"background-color: {CSS_COLORS.get(self.bg, '#000000')}")
        if self.bold:
            rules.append("font-weight: bold")
        if self.italic:
            rules.append("font-style: italic")
        if self.underline:
            rules.append("text-decoration: underline")
        return "; ".join(rules)


DEFAULT_STYLE = PenStyle()


def parse_params(raw: str) -> list[int | None]:
    """Split a CSI parameter string into integers.

    Empty or non-numeric fields become ``None`` so callers can apply their own
    defaults. Private markers (``?``, ``<``, ``=``, ``>``) are dropped.
    """
    raw = raw.lstrip("?<=>")
    if not raw:
        return []
    params: list[int | None] = []
    for field in raw.replace(":", ";").split(";"):
        params.append(int(field) if field.isdigit() else None)
    return params


def apply_sgr(style: PenStyle, params: Iterable[int | None]) -> PenStyle:
    """Return the pen style that results from one SGR sequence.

    Supported: reset, bold, italic, underline (and their ``2x`` cancels), the
    eight basic foreground/background colors and the default-color codes.
    Unknown codes are ignored.
    """
    codes = [0 if code is None else code for code in params] or [0]
    index = 0
    while index < len(codes):
        code = codes[index]
        index += 1
        if code in (38, 48):
            # Extended colors are not rendered; skip their arguments.
            if index < len(codes) and codes[index] == 5:
                index += 2
            elif index < len(codes) and codes[index] == 2:
                index += 4
            continue
        if code == 0:
            style = DEFAULT_STYLE
        elif code == 1:
            style = replace(style, bold=True)
        elif code == 3:
            style = replace(style, italic=True)
        elif code == 4:
            style = replace(style, underline=True)
        elif code == 22:
            style = replace(style, bold=False)
        elif code == 23:
            style = replace(style, italic=False)
        elif code == 24:
            style = replace(style, underline=False)
        elif code in _BASIC_FG:
            style = replace(style, fg=_BASIC_FG[code])
        elif code in _BASIC_BG:
            style = replace(style, bg=_BASIC_BG[code])
        elif code == _DEFAULT_FG:
            style = replace(style, fg=None)
        elif code == _DEFAULT_BG:
            style = replace(style, bg=None)
    return style
