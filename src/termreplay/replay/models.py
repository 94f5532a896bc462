# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Data model for offline session replay.

Models serialize with camelCase aliases (``model_dump(by_alias=True)``) for
UI and export callers, and accept either spelling on input.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

FrameType = Literal["input", "output"]


class _ReplayModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class LogRow(_ReplayModel):
    """One persisted input/output chunk of a session."""

    sequence_number: int
    timestamp: datetime
    is_input: bool
    content: str = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are UTC, so rows from mixed sources stay comparable."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DialectMatch(_ReplayModel):
    is_dialect_command: bool
    category: str | None = None
    command_name: str | None = None
    parameters: tuple[str, ...] = ()


class CommandContext(_ReplayModel):
    is_command: bool = False
    command: str | None = None
    is_tab_completion: bool = False
    is_prompt: bool = False
    dialect: DialectMatch | None = None


class Frame(_ReplayModel):
    """One reconstructed, display-ready unit: a command, a prompt or an output block."""

    timestamp: int
    type: FrameType
    raw_content: str
    cleaned_content: str = ""
    styled_content: str = ""
    command_context: CommandContext | None = None
    processing_error: str | None = None

    @property
    def is_command(self) -> bool:
        return self.command_context is not None and self.command_context.is_command

    @property
    def is_prompt(self) -> bool:
        return self.command_context is not None and self.command_context.is_prompt

    @property
    def is_dialect_command(self) -> bool:
        context = self.command_context
        return bool(context and context.is_command and context.dialect and context.dialect.is_dialect_command)


class TimelineEntry(_ReplayModel):
    command: str
    timestamp: int
    duration_until_next_frame: int | None = None
    is_dialect_command: bool = False
    category: str | None = None


class SessionSummary(_ReplayModel):
    total_duration: int = 0
    command_count: int = 0
    dialect_command_count: int = 0
    timeline: tuple[TimelineEntry, ...] = ()


class ParsedSession(_ReplayModel):
    frames: tuple[Frame, ...] = ()
    total_duration: int = 0
    command_count: int = 0
    dialect_command_count: int = 0
