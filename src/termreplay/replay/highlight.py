# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Convert captured terminal content into safe, styled HTML markup.

Content that carries SGR color codes is rendered directly from them. Content
without usable styling falls back to a heuristic highlighter that runs an
ordered list of rules over text segments: each rule only splits segments no
earlier rule has claimed, so broader later patterns never re-match inside an
already styled span.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from dataclasses import dataclass

from termreplay.logging import get_logger
from termreplay.replay.dialect import ROUTEROS_DIALECT, CommandRecognizer, DialectTable
from termreplay.terminal.sequences import iter_sgr_runs, plain_text, strip_ansi_codes
from termreplay.terminal.styles import DEFAULT_STYLE, apply_sgr

logger = get_logger(__name__)

PROMPT_STYLE = "color: #b266ff; font-weight: 600"
ADDRESS_STYLE = "color: #ff6666"
MAC_STYLE = "color: #66ffff"
NUMBER_STYLE = "color: #ffff66"
UNIT_STYLE = "color: #ff9966"
KEYWORD_STYLE = "color: #66b3ff; font-weight: 500"
PARAMETER_STYLE = "color: #ff9966"
STATE_STYLE = "color: #66ff66"
ERROR_STYLE = "color: #ff4444; font-weight: 600"


@dataclass(frozen=True)
class HighlightRule:
    """A pattern plus the styles applied to its groups (0 is the whole match)."""

    name: str
    pattern: re.Pattern[str]
    styles: Mapping[int, str]


@dataclass(frozen=True)
class Segment:
    text: str
    style: str | None = None


def build_rules(dialect: DialectTable) -> tuple[HighlightRule, ...]:
    """Highlight rules in priority order."""
    keywords = "|".join(re.escape(word) for word in dialect.keywords)
    return (
        HighlightRule("prompt", re.compile(r"\[[^\]\s]+@[^\]]+\]"), {0: PROMPT_STYLE}),
        HighlightRule(
            "ipv4",
            re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}(?:/\d{1,2})?\b"),
            {0: ADDRESS_STYLE},
        ),
        HighlightRule("mac", re.compile(r"\b[0-9A-Fa-f]{2}(?::[0-9A-Fa-f]{2}){5}\b"), {0: MAC_STYLE}),
        HighlightRule("version", re.compile(r"version:\s*(\d+\.\d+(?:\.\d+)?)"), {1: NUMBER_STYLE}),
        HighlightRule(
            "magnitude",
            re.compile(r"(\d+(?:\.\d+)?)(MiB|GiB|KiB|MHz|GHz|MB|GB|KB)\b"),
            {1: NUMBER_STYLE, 2: UNIT_STYLE},
        ),
        HighlightRule("keyword", re.compile(rf"(?<![\w-])(?:{keywords})(?![\w-])"), {0: KEYWORD_STYLE}),
        HighlightRule("parameter", re.compile(r"(\w[\w-]*)="), {1: PARAMETER_STYLE}),
        HighlightRule(
            "state",
            re.compile(
                r"\b(?:enabled|disabled|active|inactive|running|stopped|up|down|connected|disconnected)\b",
                re.IGNORECASE,
            ),
            {0: STATE_STYLE},
        ),
        HighlightRule(
            "error",
            re.compile(r"\b(?:error|fail|failed|warning|critical|timeout|invalid|denied)\b", re.IGNORECASE),
            {0: ERROR_STYLE},
        ),
    )


def _split(segment: Segment, rule: HighlightRule) -> list[Segment]:
    """Split one unstyled segment on a rule's matches."""
    pieces: list[Segment] = []
    position = 0
    text = segment.text
    for match in rule.pattern.finditer(text):
        if match.end() == match.start():
            continue
        for group in sorted(rule.styles, key=lambda g: match.start(g)):
            start, end = match.span(group)
            if start < position or start == end:
                continue
            if start > position:
                pieces.append(Segment(text[position:start]))
            pieces.append(Segment(text[start:end], rule.styles[group]))
            position = end
    if not pieces:
        return [segment]
    if position < len(text):
        pieces.append(Segment(text[position:]))
    return pieces


def render_segments(segments: list[Segment]) -> str:
    parts: list[str] = []
    for segment in segments:
        escaped = html.escape(segment.text, quote=True)
        if segment.style:
            parts.append(f'<span style="{segment.style}">{escaped}</span>')
        else:
            parts.append(escaped)
    return "".join(parts)


class StyleRenderer:
    """Renders frame content as inline-styled, HTML-escaped markup."""

    def __init__(self, dialect: DialectTable = ROUTEROS_DIALECT) -> None:
        self.recognizer = CommandRecognizer(dialect)
        self.rules = build_rules(dialect)

    def render(self, raw_content: str, cleaned_content: str, is_input: bool) -> str:
        """Render one frame.

        SGR-colored content is converted directly; otherwise (or if conversion
        fails) the heuristic highlighter runs on the cleaned text.
        """
        if not raw_content.strip():
            return html.escape(strip_ansi_codes(cleaned_content), quote=True)
        try:
            markup, styled = self.sgr_to_html(cleaned_content)
            if styled:
                return markup
        except Exception as e:
            logger.debug("highlight_fallback", error=str(e))
        return self.highlight_text(plain_text(cleaned_content), is_input)

    def sgr_to_html(self, content: str) -> tuple[str, bool]:
        """Convert SGR sequences to spans.

        Returns:
            (markup, styled) where ``styled`` is False when no non-default
            style was applied to any visible text
        """
        pen = DEFAULT_STYLE
        parts: list[str] = []
        styled = False
        for chunk, params in iter_sgr_runs(content):
            if params is not None:
                pen = apply_sgr(pen, params)
                continue
            escaped = html.escape(strip_ansi_codes(chunk), quote=True)
            if not escaped:
                continue
            if pen.is_default:
                parts.append(escaped)
            else:
                parts.append(f'<span style="{pen.css()}">{escaped}</span>')
                styled = styled or bool(chunk.strip())
        return "".join(parts), styled

    def highlight_text(self, text: str, is_input: bool) -> str:
        """Apply the heuristic rules to plain text and return escaped markup."""
        if not text.strip():
            return html.escape(text, quote=True)
        segments = [Segment(text)]
        if is_input or self.recognizer.looks_like_dialect_content(text):
            for rule in self.rules:
                next_segments: list[Segment] = []
                for segment in segments:
                    if segment.style is None:
                        next_segments.extend(_split(segment, rule))
                    else:
                        next_segments.append(segment)
                segments = next_segments
        return render_segments(segments)
