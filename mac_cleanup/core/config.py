#!/usr/bin/env python3
"""Configuration for mac-cleanup: optional JSON file plus the per-run RunConfig."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from .constants import COMMAND_TIMEOUT, HOME, KEEPALIVE_INTERVAL, PYENV_CACHE_ENV, SPACE_ROOT

CONFIG_PATHS = [
    os.path.join(HOME, ".maccleanuprc"),
    os.path.join(HOME, ".config", "mac-cleanup", "config.json"),
]

DEFAULTS: dict[str, Any] = {
    "keepalive_interval": KEEPALIVE_INTERVAL,
    "command_timeout": COMMAND_TIMEOUT,
    "space_root": SPACE_ROOT,
}

VALID_KEYS = frozenset(DEFAULTS.keys())


def load(paths: Optional[list[str]] = None) -> dict[str, Any]:
    """Load config from first readable file. Returns defaults + overrides."""
    out = dict(DEFAULTS)
    for p in paths or CONFIG_PATHS:
        if not os.path.isfile(p):
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                continue
            for k, v in raw.items():
                if k not in VALID_KEYS:
                    continue
                if k == "keepalive_interval" and isinstance(v, (int, float)):
                    val = int(v)
                    if 10 <= val <= 3600:
                        out[k] = val
                elif k == "command_timeout" and isinstance(v, (int, float)):
                    val = int(v)
                    if 1 <= val <= 3600:
                        out[k] = val
                elif k == "space_root" and isinstance(v, str) and v.strip():
                    out[k] = v.strip()
            return out
        except (OSError, json.JSONDecodeError):
            continue
    return out


def color_enabled(stream: TextIO, environ: Mapping[str, str], no_color_flag: bool = False) -> bool:
    """Colour only on an interactive terminal that is not featureless and not opted out."""
    if no_color_flag:
        return False
    if environ.get("NO_COLOR"):
        return False
    if environ.get("TERM") == "dumb":
        return False
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(frozen=True)
class RunConfig:
    """Settings for one run, built once from arguments, environment and config file."""

    verbose: bool = False
    color: bool = False
    update: bool = False
    home: str = HOME
    space_root: str = SPACE_ROOT
    keepalive_interval: int = KEEPALIVE_INTERVAL
    command_timeout: int = COMMAND_TIMEOUT
    pyenv_cache: Optional[str] = None

    @classmethod
    def build(
        cls,
        *,
        verbose: bool,
        no_color: bool,
        update: bool,
        stream: TextIO,
        environ: Mapping[str, str],
        file_config: Optional[Mapping[str, Any]] = None,
        home: Optional[str] = None,
    ) -> "RunConfig":
        cfg = dict(DEFAULTS)
        cfg.update(file_config or {})
        return cls(
            verbose=verbose,
            color=color_enabled(stream, environ, no_color),
            update=update,
            home=home or str(Path.home()),
            space_root=cfg["space_root"],
            keepalive_interval=int(cfg["keepalive_interval"]),
            command_timeout=int(cfg["command_timeout"]),
            pyenv_cache=environ.get(PYENV_CACHE_ENV) or None,
        )
