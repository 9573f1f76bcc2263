"""Exceptions raised by mac-cleanup."""


class MacCleanupError(Exception):
    """Base class for mac-cleanup errors."""


class AuthorizationError(MacCleanupError):
    """Elevated privileges could not be acquired. Aborts the run."""


class MeasurementError(MacCleanupError):
    """Free space could not be read for a filesystem root."""
