# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from termreplay.constants import (
    DEFAULT_COLS,
    DEFAULT_ENCODING,
    DEFAULT_FRAGMENT_MAX_LENGTH,
    DEFAULT_MERGE_WINDOW_MS,
    DEFAULT_MIN_COMMAND_LENGTH,
    DEFAULT_NOISE_MIN_LENGTH,
    DEFAULT_ROWS,
)


class Settings(BaseSettings):
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"

    # Live terminal
    cols: int = Field(default=DEFAULT_COLS, gt=0)
    rows: int = Field(default=DEFAULT_ROWS, gt=0)
    encoding: str = DEFAULT_ENCODING
    erase_cursor_policy: Literal["keep", "home"] = "keep"

    # Offline frame segmentation
    merge_window_ms: int = Field(default=DEFAULT_MERGE_WINDOW_MS, ge=0)
    fragment_max_length: int = Field(default=DEFAULT_FRAGMENT_MAX_LENGTH, ge=0)
    noise_min_length: int = Field(default=DEFAULT_NOISE_MIN_LENGTH, ge=0)
    min_command_length: int = Field(default=DEFAULT_MIN_COMMAND_LENGTH, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="TERMREPLAY_",
        extra="ignore",
    )
