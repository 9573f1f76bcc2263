"""Consoles and logging for mac-cleanup diagnostics."""
from __future__ import annotations

import logging
from typing import Optional, TextIO

from rich.console import Console
from rich.logging import RichHandler

from ..core.config import RunConfig

LOGGER_NAME = "mac_cleanup"


def make_console(cfg: RunConfig, stderr: bool = True, file: Optional[TextIO] = None) -> Console:
    """Console for diagnostics (stderr) or the final report (stdout)."""
    if cfg.color:
        return Console(stderr=stderr, file=file, highlight=False)
    return Console(stderr=stderr, file=file, highlight=False, color_system=None, no_color=True)


def setup_logging(cfg: RunConfig, console: Console) -> logging.Logger:
    """Route step tracing through rich on the diagnostics console; DEBUG only with --verbose."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=console,
        show_time=cfg.verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=cfg.verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if cfg.verbose else logging.WARNING)
    logger.propagate = False
    return logger
