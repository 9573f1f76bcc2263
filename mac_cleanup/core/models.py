"""Cleanup targets, preconditions, and per-target sweep results."""
from __future__ import annotations

import enum
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

# Exit statuses reported when a tool could not be run at all (shell conventions)
EXIT_TIMEOUT = 124
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class ExternalTool:
    """An optional command-line tool, looked up by name on PATH, then by fixed candidates."""

    name: str
    candidates: Tuple[str, ...] = ()

    def resolve(self) -> Optional[str]:
        found = shutil.which(self.name)
        if found:
            return found
        for p in self.candidates:
            if os.path.isfile(p) and os.access(p, os.X_OK):
                return p
        return None

    def is_available(self) -> bool:
        return self.resolve() is not None

    def invoke(self, args: Sequence[str], prefix: Sequence[str] = (), timeout: Optional[float] = None) -> int:
        """Run the tool with output discarded. Returns the exit status; never raises."""
        exe = self.resolve()
        if exe is None:
            return EXIT_NOT_FOUND
        try:
            proc = subprocess.run(
                [*prefix, exe, *args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return EXIT_TIMEOUT
        except OSError:
            return EXIT_NOT_EXECUTABLE
        return proc.returncode


class TargetKind(enum.Enum):
    PATHS = "paths"
    TOOL = "tool"


class TargetState(enum.Enum):
    PENDING = "pending"
    SKIPPED = "skipped"
    RUNNING = "running"
    COMPLETED = "completed"
    PARTIALLY_FAILED = "partially failed"


@dataclass(frozen=True)
class DirExists:
    path: str

    def is_met(self, probe) -> bool:
        return os.path.isdir(self.path)

    def __str__(self) -> str:
        return f"directory {self.path} exists"


@dataclass(frozen=True)
class ToolPresent:
    tool: ExternalTool

    def is_met(self, probe) -> bool:
        return probe.present(self.tool)

    def __str__(self) -> str:
        return f"{self.tool.name} is installed"


Precondition = Union[DirExists, ToolPresent]


@dataclass(frozen=True)
class ToolStep:
    """One invocation of a tool's own cleanup subcommand.

    `unbounded` steps run without the command timeout (long package upgrades).
    """

    tool: ExternalTool
    args: Tuple[str, ...] = ()
    sudo: bool = False
    unbounded: bool = False

    def describe(self) -> str:
        return " ".join([self.tool.name, *self.args])


@dataclass(frozen=True)
class CleanupTarget:
    """A named unit of cleanup work: glob patterns to empty, or tool steps to run.

    `paths` entries are glob patterns. A match that is a directory has its
    contents removed (the directory itself stays); any other match is unlinked.
    `sudo` marks targets whose paths may be system-owned and are retried
    through sudo when in-process deletion is denied.
    """

    name: str
    desc: str
    kind: TargetKind
    paths: Tuple[str, ...] = ()
    steps: Tuple[ToolStep, ...] = ()
    precondition: Optional[Precondition] = None
    sudo: bool = False

    def __post_init__(self) -> None:
        if self.kind is TargetKind.PATHS and (not self.paths or self.steps):
            raise ValueError(f"{self.name}: a paths target needs paths and no steps")
        if self.kind is TargetKind.TOOL and (not self.steps or self.paths):
            raise ValueError(f"{self.name}: a tool target needs steps and no paths")


@dataclass
class SweepError:
    subject: str
    message: str


@dataclass
class SweepResult:
    """Outcome of one target in one sweep. bytes_freed is None when unknown."""

    name: str
    state: TargetState = TargetState.PENDING
    bytes_freed: Optional[int] = None
    errors: List[SweepError] = field(default_factory=list)

    @property
    def attempted(self) -> bool:
        return self.state not in (TargetState.PENDING, TargetState.SKIPPED)

    def add_error(self, subject: str, message: str) -> None:
        self.errors.append(SweepError(subject, message))
