# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Batch reconstruction of persisted session logs into display frames."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from termreplay.logging import get_logger
from termreplay.replay.aggregate import summarize
from termreplay.replay.dialect import CommandRecognizer
from termreplay.replay.highlight import StyleRenderer
from termreplay.replay.models import CommandContext, Frame, LogRow, ParsedSession
from termreplay.replay.policy import ROUTEROS_POLICY, SegmentationPolicy
from termreplay.terminal.sequences import clean_for_display, plain_text, strip_ansi_codes

logger = get_logger(__name__)

_LINE_TERMINATOR_RE = re.compile(r"[\r\n]")


def _relative_ms(timestamp: datetime, start: datetime) -> int:
    return max(0, round((timestamp - start).total_seconds() * 1000))


def extract_command(raw_content: str) -> str:
    """Text typed before the first line terminator, without control bytes."""
    head = _LINE_TERMINATOR_RE.split(raw_content, maxsplit=1)[0]
    return strip_ansi_codes(head).replace("\t", " ").strip()


class FrameSegmenter:
    """Turns the ordered log rows of one session into a :class:`ParsedSession`.

    A segmenter holds no per-parse state, so one instance may serve any number
    of sessions, including concurrently.
    """

    def __init__(
        self,
        policy: SegmentationPolicy = ROUTEROS_POLICY,
        recognizer: CommandRecognizer | None = None,
        renderer: StyleRenderer | None = None,
    ) -> None:
        self.policy = policy
        self.recognizer = recognizer or CommandRecognizer()
        self.renderer = renderer or StyleRenderer(self.recognizer.table)

    def parse(self, rows: Iterable[LogRow | Mapping[str, Any]]) -> ParsedSession:
        """Parse one session's log rows.

        Args:
            rows: Log rows (models or mappings), in any order

        Returns:
            Parsed session; empty input gives an empty session
        """
        ordered = sorted(self._validate_rows(rows), key=lambda row: (row.timestamp, row.sequence_number))
        if not ordered:
            return ParsedSession()

        start = ordered[0].timestamp
        frames = [self.build_frame(row, _relative_ms(row.timestamp, start)) for row in ordered]
        grouped = self.group_frames(frames)
        kept = self.filter_noise(grouped)
        summary = summarize(kept)
        logger.debug(
            "session_parsed",
            rows=len(ordered),
            frames=len(kept),
            commands=summary.command_count,
        )
        return ParsedSession(
            frames=tuple(kept),
            total_duration=summary.total_duration,
            command_count=summary.command_count,
            dialect_command_count=summary.dialect_command_count,
        )

    @staticmethod
    def _validate_rows(rows: Iterable[LogRow | Mapping[str, Any]]) -> list[LogRow]:
        valid: list[LogRow] = []
        for index, row in enumerate(rows):
            if isinstance(row, LogRow):
                valid.append(row)
                continue
            try:
                valid.append(LogRow.model_validate(row))
            except ValidationError as e:
                logger.warning("invalid_log_row_skipped", index=index, errors=e.error_count())
        return valid

    # Per-row derivation

    def build_frame(self, row: LogRow, timestamp: int) -> Frame:
        """Derive one frame; a failure keeps only the raw content."""
        frame_type = "input" if row.is_input else "output"
        try:
            cleaned = clean_for_display(row.content)
            context = self.analyze(row.content, cleaned, row.is_input)
            styled = self.renderer.render(row.content, cleaned, row.is_input)
        except Exception as e:
            logger.warning(
                "row_processing_failed",
                sequence_number=row.sequence_number,
                error=str(e),
            )
            return Frame(
                timestamp=timestamp,
                type=frame_type,
                raw_content=row.content,
                processing_error=str(e) or type(e).__name__,
            )
        return Frame(
            timestamp=timestamp,
            type=frame_type,
            raw_content=row.content,
            cleaned_content=cleaned,
            styled_content=styled,
            command_context=context,
        )

    def analyze(self, raw_content: str, cleaned_content: str, is_input: bool) -> CommandContext:
        """Classify a row as command, tab completion or prompt."""
        if not is_input:
            return CommandContext(is_prompt=self.policy.is_prompt(plain_text(cleaned_content)))

        is_tab_completion = "\t" in raw_content
        if not _LINE_TERMINATOR_RE.search(raw_content):
            return CommandContext(is_tab_completion=is_tab_completion)

        command = extract_command(raw_content)
        if not self.policy.is_command_text(command):
            return CommandContext(is_tab_completion=is_tab_completion)
        return CommandContext(
            is_command=True,
            command=command,
            is_tab_completion=is_tab_completion,
            dialect=self.recognizer.recognize(command),
        )

    # Grouping and filtering

    def _mergeable(self, current: Frame, following: Frame) -> bool:
        if current.type != "output" or following.type != "output":
            return False
        if current.is_command or following.is_command or current.is_prompt or following.is_prompt:
            return False
        if current.processing_error or following.processing_error:
            return False
        if not self.policy.within_merge_window(current.timestamp, following.timestamp):
            return False
        return self.policy.looks_like_fragments(
            plain_text(current.cleaned_content),
            plain_text(following.cleaned_content),
        )

    def group_frames(self, frames: list[Frame]) -> list[Frame]:
        """Merge adjacent output fragments that belong to one logical block."""
        grouped: list[Frame] = []
        for frame in frames:
            if not frame.raw_content.strip() and not frame.cleaned_content.strip():
                continue
            if grouped and self._mergeable(grouped[-1], frame):
                grouped[-1] = merge_frames(grouped[-1], frame)
            else:
                grouped.append(frame)
        return grouped

    def filter_noise(self, frames: list[Frame]) -> list[Frame]:
        """Drop frames without displayable content; commands are always kept."""
        return [
            frame
            for frame in frames
            if frame.is_command
            or frame.processing_error
            or not self.policy.is_noise(plain_text(frame.cleaned_content))
        ]


def merge_frames(target: Frame, source: Frame) -> Frame:
    """Append ``source`` to ``target``, keeping the later timestamp."""
    return target.model_copy(
        update={
            "timestamp": max(target.timestamp, source.timestamp),
            "raw_content": target.raw_content + source.raw_content,
            "cleaned_content": f"{target.cleaned_content}\n{source.cleaned_content}",
            "styled_content": f"{target.styled_content}\n{source.styled_content}",
        }
    )


def parse_session(
    rows: Iterable[LogRow | Mapping[str, Any]],
    policy: SegmentationPolicy = ROUTEROS_POLICY,
) -> ParsedSession:
    """Parse one session's log rows with a fresh segmenter."""
    return FrameSegmenter(policy).parse(rows)
