# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pyte
import pytest
import structlog

from termreplay.terminal.interpreter import EscapeInterpreter
from termreplay.terminal.screen import ScreenBuffer

RowFactory = Callable[..., dict[str, Any]]

SESSION_START = datetime(2025, 3, 14, 9, 26, 53, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo configure_logging() so no test keeps a captured stderr stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def screen() -> ScreenBuffer:
    """Small 10x4 screen buffer."""
    return ScreenBuffer(10, 4)


@pytest.fixture
def interpreter(screen: ScreenBuffer) -> EscapeInterpreter:
    return EscapeInterpreter(screen)


@pytest.fixture
def pyte_screen() -> pyte.Screen:
    """Reference pyte screen for cross-checking plain text rendering."""
    return pyte.Screen(20, 5)


@pytest.fixture
def pyte_stream(pyte_screen: pyte.Screen) -> pyte.Stream:
    return pyte.Stream(pyte_screen)


@pytest.fixture
def make_row() -> RowFactory:
    """Build a persisted log row the way the storage layer returns it."""
    counter = {"seq": 0}

    def _make(content: str, *, at_ms: int = 0, is_input: bool = False, seq: int | None = None) -> dict[str, Any]:
        counter["seq"] += 1
        return {
            "sequenceNumber": counter["seq"] if seq is None else seq,
            "timestamp": (SESSION_START + timedelta(milliseconds=at_ms)).isoformat(),
            "isInput": is_input,
            "content": content,
        }

    return _make
