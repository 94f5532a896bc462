# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from pathlib import Path

import click

from termreplay.engine import ReplayEngine
from termreplay.errors import LogFormatError
from termreplay.logging import configure_logging
from termreplay.replay.aggregate import format_timestamp
from termreplay.replay.loader import load_log_rows
from termreplay.replay.models import ParsedSession
from termreplay.replay.viewer import replay_session
from termreplay.settings import Settings


def _parse_log(engine: ReplayEngine, log_path: Path, session_id: str | None) -> ParsedSession:
    try:
        rows = load_log_rows(log_path, session_id=session_id)
    except LogFormatError as e:
        raise click.ClickException(f"{log_path}: {e}") from e
    return engine.parse(rows)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.pass_context
def cli(ctx: click.Context) -> None:
    """termreplay command line interface."""
    settings = Settings()
    configure_logging(settings)
    ctx.obj = ReplayEngine(settings)


@cli.command("parse")
@click.argument("log_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--session-id", default=None, help="Only use rows tagged with this session id.")
@click.option("--compact", is_flag=True, help="Emit single-line JSON.")
@click.pass_obj
def parse_cmd(engine: ReplayEngine, log_path: Path, session_id: str | None, compact: bool) -> None:
    """Reconstruct frames from a JSONL session log and print them as JSON."""
    session = _parse_log(engine, log_path, session_id)
    click.echo(session.model_dump_json(by_alias=True, indent=None if compact else 2))


@cli.command("timeline")
@click.argument("log_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--session-id", default=None, help="Only use rows tagged with this session id.")
@click.pass_obj
def timeline_cmd(engine: ReplayEngine, log_path: Path, session_id: str | None) -> None:
    """Print the commands of a session with their timing."""
    session = _parse_log(engine, log_path, session_id)
    summary = engine.summarize(session)
    for entry in summary.timeline:
        category = f"  [{entry.category}]" if entry.is_dialect_command else ""
        click.echo(f"{format_timestamp(entry.timestamp):>8}  {entry.command}{category}")
    click.echo(
        f"{summary.command_count} commands ({summary.dialect_command_count} device), "
        f"duration {format_timestamp(summary.total_duration)}"
    )


@cli.command("replay")
@click.argument("log_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--session-id", default=None, help="Only use rows tagged with this session id.")
@click.option("--speed", type=float, default=1.0, show_default=True, help="Playback speed multiplier.")
@click.option("--step", is_flag=True, help="Wait for a keypress between frames.")
@click.pass_obj
def replay_cmd(engine: ReplayEngine, log_path: Path, session_id: str | None, speed: float, step: bool) -> None:
    """Play a recorded session back in the terminal."""
    session = _parse_log(engine, log_path, session_id)
    replay_session(session, speed=speed, step=step, echo=click.echo, prompt=lambda text: click.pause(info=text))


@cli.command("screen")
@click.argument("raw_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--cols", type=int, default=None, help="Terminal width (default from settings).")
@click.option("--rows", type=int, default=None, help="Terminal height (default from settings).")
@click.option("--chunk-size", type=int, default=4096, show_default=True)
@click.pass_obj
def screen_cmd(engine: ReplayEngine, raw_path: Path, cols: int | None, rows: int | None, chunk_size: int) -> None:
    """Feed a raw output capture through the live emulator and print the final screen."""
    emulator = engine.live(cols=cols, rows=rows)
    with raw_path.open("rb") as f:
        while chunk := f.read(max(chunk_size, 1)):
            emulator.process(chunk)
    emulator.close()
    lines = [line.rstrip() for line in emulator.get_text().split("\n")]
    while lines and not lines[-1]:
        lines.pop()
    click.echo("\n".join(lines))
