"""Disk and path helpers for mac-cleanup: directory sizes and free-space samples."""
from __future__ import annotations

import os
import shutil
import time
from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import SIZE_UNITS
from ..core.errors import MeasurementError


def to_human(num: int) -> str:
    """Format a byte count the way the final report shows it, e.g. '1.50 KiB'.

    Divides by 1024 while at least 1024 remains, keeping the truncated two-digit
    fraction of the last division. Zero or negative counts render as '0 Bytes'.
    """
    if num is None or num <= 0:
        return "0 Bytes"
    num = int(num)
    tier = 0
    frac = None
    while num >= 1024 and tier < len(SIZE_UNITS) - 1:
        frac = (num % 1024) * 100 // 1024
        num //= 1024
        tier += 1
    if frac is None:
        return f"{num} {SIZE_UNITS[tier]}"
    return f"{num}.{frac:02d} {SIZE_UNITS[tier]}"


def du_path(path) -> Optional[int]:
    """Apparent size of path in bytes, not following links. None if it cannot be read at all."""
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        return 0
    except OSError:
        return None
    if not os.path.isdir(path) or os.path.islink(path):
        return st.st_size
    try:
        os.listdir(path)
    except OSError:
        return None
    total = 0
    for root, dirs, files in os.walk(path, followlinks=False):
        for f in files:
            try:
                total += os.lstat(os.path.join(root, f)).st_size
            except OSError:
                pass
    return total


def count_path(path) -> int:
    """Count top-level items (files + dirs) in path. Returns 0 if unreadable."""
    try:
        if not os.path.exists(path):
            return 0
        if os.path.isfile(path):
            return 1
        return len(os.listdir(path))
    except OSError:
        return 0


@dataclass(frozen=True)
class SpaceSample:
    available_bytes: int
    root: str
    taken_at: float = field(default_factory=time.time)


class SpaceMeter:
    """Reads free space on the filesystem holding `root`."""

    def __init__(self, root: str = "/"):
        self.root = root

    def sample(self, root: Optional[str] = None) -> SpaceSample:
        root = root or self.root
        try:
            usage = shutil.disk_usage(root)
        except OSError as e:
            raise MeasurementError(f"cannot read free space on {root}: {e}") from e
        return SpaceSample(available_bytes=usage.free, root=root)

    @staticmethod
    def freed_between(before: SpaceSample, after: SpaceSample) -> int:
        return after.available_bytes - before.available_bytes
