"""Core constants, targets, models, and config for mac-cleanup."""

from .constants import HOME, KEEPALIVE_INTERVAL, SIZE_UNITS, SPACE_ROOT
from .errors import AuthorizationError, MacCleanupError, MeasurementError
from .models import CleanupTarget, SweepResult, TargetKind, TargetState
from .targets import build_targets
from . import config

__all__ = [
    "HOME",
    "KEEPALIVE_INTERVAL",
    "SIZE_UNITS",
    "SPACE_ROOT",
    "AuthorizationError",
    "MacCleanupError",
    "MeasurementError",
    "CleanupTarget",
    "SweepResult",
    "TargetKind",
    "TargetState",
    "build_targets",
    "config",
]
