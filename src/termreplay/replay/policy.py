# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Segmentation heuristics: prompt detection, fragment merging and noise filtering.

The thresholds and patterns are tuned for RouterOS sessions. Other dialects
supply their own :class:`SegmentationPolicy`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from termreplay.constants import (
    DEFAULT_FRAGMENT_MAX_LENGTH,
    DEFAULT_MERGE_WINDOW_MS,
    DEFAULT_MIN_COMMAND_LENGTH,
    DEFAULT_NOISE_MIN_LENGTH,
)

if TYPE_CHECKING:
    from termreplay.settings import Settings

PROMPT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\[[^\]]*\]\s*(?:/[\w/ .-]*)?>\s*$"),  # [admin@router] >, [admin@router] /ip address>
    re.compile(r"^.*@.*:.*\$\s*$"),  # user@host:path$
    re.compile(r"^.*@.*:.*#\s*$"),  # user@host:path#
    re.compile(r"^>\s*$"),
    re.compile(r"^#\s*$"),
    re.compile(r"^\$\s*$"),
)

FRAGMENT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\s*\d+\s+\w+="),  # list rows: " 0 name=ether1 ..."
    re.compile(r"^\s*flags:", re.IGNORECASE),
    re.compile(r"^\s*\w+:\s*\w+"),  # key: value pairs
)

_NOISE_RE = re.compile(r"^[\s\x00-\x1f\x7f-\x9f]*$")


@dataclass(frozen=True)
class SegmentationPolicy:
    """Replaceable thresholds and patterns for the frame segmenter."""

    merge_window_ms: int = DEFAULT_MERGE_WINDOW_MS
    fragment_max_length: int = DEFAULT_FRAGMENT_MAX_LENGTH
    fragment_patterns: tuple[re.Pattern[str], ...] = FRAGMENT_PATTERNS
    prompt_patterns: tuple[re.Pattern[str], ...] = PROMPT_PATTERNS
    min_command_length: int = DEFAULT_MIN_COMMAND_LENGTH
    noise_min_length: int = DEFAULT_NOISE_MIN_LENGTH
    ascii_art_pattern: re.Pattern[str] | None = None
    ascii_art_ratio: float = 0.5

    @classmethod
    def from_settings(cls, settings: Settings, base: SegmentationPolicy | None = None) -> SegmentationPolicy:
        """Overlay configured thresholds on a base policy (RouterOS by default)."""
        return replace(
            base or ROUTEROS_POLICY,
            merge_window_ms=settings.merge_window_ms,
            fragment_max_length=settings.fragment_max_length,
            noise_min_length=settings.noise_min_length,
            min_command_length=settings.min_command_length,
        )

    def is_prompt(self, text: str) -> bool:
        trimmed = text.strip()
        return any(pattern.match(trimmed) for pattern in self.prompt_patterns)

    def is_command_text(self, command: str) -> bool:
        return len(command) >= self.min_command_length

    def within_merge_window(self, earlier_ms: int, later_ms: int) -> bool:
        return later_ms - earlier_ms < self.merge_window_ms

    def looks_like_fragments(self, first: str, second: str) -> bool:
        """Check if two output texts look like pieces of one logical block."""
        if len(first) < self.fragment_max_length and len(second) < self.fragment_max_length:
            return True
        return any(pattern.match(first) and pattern.match(second) for pattern in self.fragment_patterns)

    def is_ascii_art(self, text: str) -> bool:
        if self.ascii_art_pattern is None:
            return False
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            return False
        art_lines = [line for line in lines if self.ascii_art_pattern.match(line)]
        return len(art_lines) > len(lines) * self.ascii_art_ratio

    def is_noise(self, text: str) -> bool:
        """Check if plain frame text carries nothing worth displaying."""
        trimmed = text.strip()
        if not trimmed:
            return True
        if len(trimmed) < self.noise_min_length:
            return True
        if _NOISE_RE.match(trimmed):
            return True
        return self.is_ascii_art(trimmed)


# Banner fragments drawn with the letters of the MikroTik logo.
ROUTEROS_POLICY = SegmentationPolicy(ascii_art_pattern=re.compile(r"^[MKTIORG\s\-()]+$"))
