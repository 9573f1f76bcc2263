#!/usr/bin/env python3
"""Optional external tools: presence checks and their own cache-clearing subcommands."""
from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import COMMAND_TIMEOUT
from ..core.models import ExternalTool, ToolStep

logger = logging.getLogger(__name__)


class ToolProbe:
    """Answers whether a tool is installed and runs tool steps.

    A missing tool is an expected outcome, not an error. Steps marked `sudo`
    run through the privilege session's non-interactive sudo prefix.
    """

    def __init__(self, session=None, timeout: int = COMMAND_TIMEOUT):
        self.session = session
        self.timeout = timeout

    def present(self, tool: ExternalTool) -> bool:
        try:
            return tool.is_available()
        except OSError:
            return False

    def run(self, step: ToolStep, timeout: Optional[int] = None) -> int:
        """Run one step with its output discarded. Returns the exit status."""
        prefix = []
        if step.sudo and self.session is not None:
            prefix = self.session.privileged([])
        logger.debug("Running %s%s", "sudo " if prefix else "", step.describe())
        if step.unbounded:
            timeout = None
        else:
            timeout = timeout or self.timeout
        status = step.tool.invoke(step.args, prefix=prefix, timeout=timeout)
        if status != 0:
            logger.debug("%s exited with status %d", step.describe(), status)
        return status
