# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for termreplay.

Parsing never raises: malformed escape sequences and rows that fail to derive
are recovered inside the engine. These exceptions cover caller misuse of the
live path and unreadable log input.
"""


class TermReplayError(Exception):
    """Base exception for termreplay."""

    pass


class SessionEndedError(TermReplayError):
    """Data was fed to a live terminal after its end-of-session signal."""

    pass


class ConcurrentWriterError(TermReplayError):
    """A second writer tried to feed a live terminal that is already being fed."""

    pass


class LogFormatError(TermReplayError):
    """A persisted session log could not be read."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
