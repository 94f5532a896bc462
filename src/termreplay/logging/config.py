# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for termreplay.

Logs always go to stderr because stdout carries parsed sessions and screen
dumps. ``TERMREPLAY_LOG_FORMAT=json`` switches from the console renderer to
one JSON object per line, for collectors that ingest replay runs.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from termreplay.settings import Settings

__all__ = ["get_logger", "configure_logging", "build_processors"]


def build_processors(log_format: str = "console") -> list[structlog.typing.Processor]:
    """Processor chain for the given output format (``console`` or ``json``)."""
    processors: list[structlog.typing.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer(sort_keys=True)]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog from settings; call once per process.

    Args:
        settings: Settings instance (read from the environment if None)
    """
    if settings is None:
        from termreplay.settings import Settings

        settings = Settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.WARNING)

    structlog.configure(
        processors=build_processors(settings.log_format),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a lazily configured logger, tagged with the module name when given."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger=name)
