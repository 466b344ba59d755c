from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import typer

from weeklog.core.config import WeeklogConfig, default_config, save_config_atomic
from weeklog.core.errors import ConfigError, NotPastError, ParseError
from weeklog.core.factory import load_runtime, resolve_home
from weeklog.core.parser import parse_path
from weeklog.core.types import File
from weeklog.core.weekly import format_duration, weekly_summary

app = typer.Typer(help="Weekly totals for plain-text time logs")

logger = logging.getLogger("weeklog.cli")


def _parse_today(value: str | None) -> datetime:
    if value is None:
        return datetime.now()
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid datetime: {value}", param_hint="--today") from exc


def _load_document(path: Path) -> File:
    try:
        return parse_path(path)
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"error: cannot read {path}: {exc}")
        raise typer.Exit(code=1)
    except ParseError as exc:
        typer.echo(f"error: {path}: {exc}")
        raise typer.Exit(code=1)


def _runtime(home: Path | None, log_level: str | None) -> WeeklogConfig:
    try:
        return load_runtime(home=home, log_level=log_level)
    except ConfigError as exc:
        typer.echo(f"error: {exc}")
        raise typer.Exit(code=1)


@app.command("init")
def init_command(home: Path | None = typer.Option(None, help="weeklog home directory")) -> None:
    """Create the home directory and a default config file."""
    home_dir = resolve_home(home)
    config_path = home_dir / "config.yml"
    if config_path.exists():
        typer.echo(f"config already exists: {config_path}")
        return

    save_config_atomic(config=default_config(), path=config_path)
    typer.echo(f"initialized weeklog home: {home_dir}")
    typer.echo(f"config: {config_path}")


@app.command("total")
def total_command(
    path: Path = typer.Argument(..., help="Time log to read"),
    today: str | None = typer.Option(
        None, "--today", help="Reference local datetime, ISO format (default: now)"
    ),
    dump: Path | None = typer.Option(None, "--dump", help="Write the parsed document as JSON"),
    require_past: bool = typer.Option(
        False, "--require-past", help="Fail if the log holds entries later than --today"
    ),
    home: Path | None = typer.Option(None, help="weeklog home directory"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override config log level"),
) -> None:
    """Print the total logged time of the current week."""
    config = _runtime(home, log_level)
    reference = _parse_today(today)
    document = _load_document(path)

    dump_path = dump or (Path(config.dump_path).expanduser() if config.dump_path else None)
    if dump_path is not None:
        try:
            dump_path.parent.mkdir(parents=True, exist_ok=True)
            dump_path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            typer.echo(f"error: cannot write dump {dump_path}: {exc}")
            raise typer.Exit(code=1)
        logger.debug("wrote document dump to %s", dump_path)

    try:
        summary = weekly_summary(document, reference, require_past=require_past)
    except NotPastError as exc:
        typer.echo(f"error: {exc}")
        for info in exc.entries:
            typer.echo(f"  {info.time.isoformat(timespec='minutes')} - {format_duration(info.duration)}")
        raise typer.Exit(code=1)

    typer.echo(f"window_start: {summary.window_start.isoformat()}")
    typer.echo(f"weekly_total: {format_duration(summary.total)}")
    typer.echo(f"entries: {summary.entry_count}")
    for title in sorted(summary.by_tag):
        label = title or "(untagged)"
        typer.echo(f"  {label}: {format_duration(summary.by_tag[title])}")


@app.command("show")
def show_command(
    path: Path = typer.Argument(..., help="Time log to read"),
    home: Path | None = typer.Option(None, help="weeklog home directory"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override config log level"),
) -> None:
    """Print the parsed document as JSON."""
    _runtime(home, log_level)
    document = _load_document(path)
    typer.echo(json.dumps(document.model_dump(mode="json"), indent=2))


@app.command("check")
def check_command(
    path: Path = typer.Argument(..., help="Time log to read"),
    home: Path | None = typer.Option(None, help="weeklog home directory"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override config log level"),
) -> None:
    """Parse the log and report grammar errors."""
    _runtime(home, log_level)
    document = _load_document(path)
    typer.echo(f"ok: {len(document.records)} records")


if __name__ == "__main__":
    app()
