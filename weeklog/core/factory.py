"""Runtime wiring shared by the CLI commands."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from weeklog.core.config import WeeklogConfig, load_config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def resolve_home(home: Path | None) -> Path:
    """Normalize .weeklog home directory path."""
    if home is not None:
        return home.expanduser().resolve()
    env_home = os.environ.get("WEEKLOG_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path(".weeklog").resolve()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def load_runtime(*, home: Path | None, log_level: str | None = None) -> WeeklogConfig:
    """Load the user config from the home directory and set up logging."""
    home_dir = resolve_home(home)
    config = load_config(path=home_dir / "config.yml").config
    configure_logging(log_level or config.log_level)
    logging.getLogger(__name__).debug("loaded config from %s", home_dir)
    return config
