#!/usr/bin/env python3
"""Sweep logic: run each cleanup target in order, deleting paths or running tool steps."""
from __future__ import annotations

import glob
import logging
import os
import shutil
import subprocess
from typing import Iterable, List, Optional

from rich.console import Console

from ..core.models import CleanupTarget, SweepResult, TargetKind, TargetState
from ..utils.disk import count_path, du_path
from .tool_service import ToolProbe

logger = logging.getLogger(__name__)


def _is_pattern(path: str) -> bool:
    return any(c in path for c in "*?[")


def _add(total: Optional[int], size: Optional[int]) -> Optional[int]:
    if total is None or size is None:
        return None
    return total + size


class TargetSweeper:
    """Runs cleanup targets strictly in order. Every failure stays inside its path or target."""

    def __init__(self, probe: ToolProbe, session=None, console: Optional[Console] = None):
        self.probe = probe
        self.session = session
        self.console = console or Console(stderr=True)

    def run_all(self, targets: Iterable[CleanupTarget]) -> List[SweepResult]:
        return [self.run_target(t) for t in targets]

    def run_target(self, target: CleanupTarget) -> SweepResult:
        result = SweepResult(target.name)
        if target.precondition is not None and not target.precondition.is_met(self.probe):
            logger.debug("Skipping %s: %s is not true", target.name, target.precondition)
            result.state = TargetState.SKIPPED
            return result

        result.state = TargetState.RUNNING
        self.console.print(f"[cyan]→[/] {target.desc}...")
        if target.kind is TargetKind.PATHS:
            self._sweep_paths(target, result)
        else:
            self._run_steps(target, result)

        result.state = TargetState.PARTIALLY_FAILED if result.errors else TargetState.COMPLETED
        for err in result.errors:
            logger.debug("%s: %s: %s", target.name, err.subject, err.message)
        return result

    def _sweep_paths(self, target: CleanupTarget, result: SweepResult) -> None:
        result.bytes_freed = 0
        for pattern in target.paths:
            matches = sorted(glob.glob(pattern)) if _is_pattern(pattern) else [pattern]
            for path in matches:
                if not os.path.lexists(path):
                    continue
                size = du_path(path)
                if size is None:
                    logger.debug("Size of %s unknown", path)
                if os.path.isdir(path) and not os.path.islink(path):
                    logger.debug("Emptying %s (%d items)", path, count_path(path))
                    self._empty_dir(path, target, result)
                else:
                    logger.debug("Removing %s", path)
                    self._remove(path, target, result)
                left = du_path(path) if os.path.lexists(path) else 0
                if size is not None and left is not None:
                    result.bytes_freed = _add(result.bytes_freed, max(size - left, 0))
                else:
                    result.bytes_freed = None

    def _empty_dir(self, parent: str, target: CleanupTarget, result: SweepResult) -> None:
        try:
            names = os.listdir(parent)
        except PermissionError as e:
            # Unreadable without root: let find(1) delete the contents, keep the directory
            if not self._sudo_run(["find", parent, "-mindepth", "1", "-delete"], target):
                result.add_error(parent, str(e))
            return
        except OSError as e:
            result.add_error(parent, str(e))
            return
        for name in names:
            self._remove(os.path.join(parent, name), target, result)

    def _remove(self, path: str, target: CleanupTarget, result: SweepResult) -> None:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path, ignore_errors=True)
            else:
                os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            if not self._sudo_run(["rm", "-rf", "--", path], target):
                result.add_error(path, str(e))
            return
        if os.path.lexists(path) and not self._sudo_run(["rm", "-rf", "--", path], target):
            result.add_error(path, "could not be fully removed")

    def _sudo_run(self, argv: List[str], target: CleanupTarget) -> bool:
        """Retry a denied deletion through sudo. Only for sudo targets with an active session."""
        if not target.sudo or self.session is None or not self.session.active:
            return False
        logger.debug("Retrying with sudo: %s", " ".join(argv))
        try:
            subprocess.run(
                self.session.privileged(argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=self.probe.timeout,
            )
            return True
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.debug("sudo %s failed: %s", argv[0], e)
            return False

    def _run_steps(self, target: CleanupTarget, result: SweepResult) -> None:
        for step in target.steps:
            status = self.probe.run(step)
            if status != 0:
                result.add_error(step.describe(), f"exited with status {status}")
                break
