# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared constants for termreplay."""

from __future__ import annotations

# Default terminal settings (RouterOS SSH sessions negotiate 80x24)
DEFAULT_COLS = 80
DEFAULT_ROWS = 24
DEFAULT_ENCODING = "utf-8"
TAB_WIDTH = 8

# Frame segmentation defaults
DEFAULT_MERGE_WINDOW_MS = 1000
DEFAULT_FRAGMENT_MAX_LENGTH = 50
DEFAULT_NOISE_MIN_LENGTH = 3
DEFAULT_MIN_COMMAND_LENGTH = 2
