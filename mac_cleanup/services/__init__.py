"""Services (business logic) for mac-cleanup."""

from . import privilege_service
from . import tool_service
from . import sweep_service

__all__ = ["privilege_service", "tool_service", "sweep_service"]
