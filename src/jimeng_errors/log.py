"""Logging setup — rich console handler on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from jimeng_errors.config.hierarchy import load_config_hierarchy

error_console = Console(stderr=True)


def setup_logging(level: str | int | None = None) -> None:
    """Configure root logging; the level falls back to the config hierarchy."""
    if level is None:
        level = load_config_hierarchy()["log_level"]
    if isinstance(level, str):
        level = level.upper()

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
        force=True,
    )
