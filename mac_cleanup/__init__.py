"""mac-cleanup: reclaim disk space by clearing macOS and developer-tool caches."""

__version__ = "1.0.0"

__all__ = ["cli", "core", "services", "utils", "__version__"]
