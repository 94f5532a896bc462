# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Escape-sequence matching and text cleanup for captured session content.

All helpers scan the text once with a single alternation, so removing one
sequence can never splice its neighbours into a new sequence. That keeps
:func:`clean_for_display` idempotent.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from termreplay.terminal.styles import parse_params

_SEQUENCE_RE = re.compile(
    r"""
    (?P<osc>\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)?)   # OSC: window/icon titles
    | (?P<csi>(?:\x1b\[|\x9b)[0-?]*[\x20-/]*[@-~])  # CSI: cursor, erase, reports, SGR
    | (?P<esc>\x1b[\x20-/]*[0-~])                  # two-byte escapes, charset selection
    | (?P<stray>\x1b)                              # ESC with nothing usable after it
    | (?P<ctrl>[\x00-\x08\x0b\x0c\x0e-\x1a\x1c-\x1f\x7f-\x9f])
    """,
    re.VERBOSE,
)
_SGR_RE = re.compile(r"\x1b\[([0-9;:]*)m")
_EXCESS_NEWLINES_RE = re.compile(r"\n{4,}")


def _keep_sgr(match: re.Match[str]) -> str:
    sequence = match.group(0)
    if match.group("csi") and _SGR_RE.fullmatch(sequence):
        return sequence
    return ""


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def clean_for_display(content: str) -> str:
    """Clean captured terminal content while preserving SGR color codes.

    - Removes cursor movement, erase, position reports, device attributes,
      mode set/reset, charset selection and OSC title sequences.
    - Removes control characters other than TAB, LF and CR.
    - Normalizes line endings and collapses runs of 4+ newlines to 3.
    - Trims surrounding whitespace, keeping inner spacing for ASCII art.
    """
    if not content:
        return ""
    cleaned = _SEQUENCE_RE.sub(_keep_sgr, content)
    cleaned = _normalize_newlines(cleaned)
    cleaned = _EXCESS_NEWLINES_RE.sub("\n\n\n", cleaned)
    return cleaned.strip()


def strip_ansi_codes(text: str) -> str:
    """Remove every escape sequence and control character except TAB/LF/CR.

    Args:
        text: Text potentially containing ANSI codes

    Returns:
        Text with ANSI codes removed
    """
    if not text:
        return ""
    return _SEQUENCE_RE.sub("", text)


def plain_text(content: str) -> str:
    """Text used for classification: no escape sequences, LF line endings."""
    return _normalize_newlines(strip_ansi_codes(content))


def iter_sgr_runs(text: str) -> Iterator[tuple[str, list[int | None] | None]]:
    """Split text on SGR sequences.

    Yields ``(chunk, None)`` for text and ``("", params)`` for each SGR
    sequence, in order. Non-SGR sequences are left inside the text chunks.
    """
    position = 0
    for match in _SGR_RE.finditer(text):
        if match.start() > position:
            yield text[position : match.start()], None
        yield "", parse_params(match.group(1))
        position = match.end()
    if position < len(text):
        yield text[position:], None
