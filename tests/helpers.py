"""Test doubles shared by the mac-cleanup tests."""
import io

from rich.console import Console

from mac_cleanup.core.errors import MeasurementError
from mac_cleanup.utils.disk import SpaceSample


def quiet_console():
    return Console(file=io.StringIO(), highlight=False, color_system=None, width=120)


def console_text(console):
    return console.file.getvalue()


def write_file(path, size):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)


class FakeProbe:
    """Tool probe with a fixed set of installed tools and scripted exit statuses."""

    timeout = 5

    def __init__(self, installed=(), statuses=None, on_run=None):
        self.installed = set(installed)
        self.statuses = statuses or {}
        self.on_run = on_run
        self.calls = []

    def present(self, tool):
        return tool.name in self.installed

    def run(self, step, timeout=None):
        self.calls.append(step.describe())
        if self.on_run is not None:
            self.on_run(step)
        return self.statuses.get(step.describe(), 0)


class FakeSession:
    def __init__(self, fail=None):
        self.fail = fail
        self.active = False
        self.acquired = 0
        self.released = 0

    def acquire(self):
        self.acquired += 1
        if self.fail is not None:
            raise self.fail
        self.active = True

    def release(self):
        self.released += 1
        self.active = False

    def privileged(self, argv):
        return ["sudo", "-n", *argv]


class FakeMeter:
    def __init__(self, *available, fail=False):
        self.available = list(available)
        self.fail = fail

    def sample(self, root=None):
        if self.fail:
            raise MeasurementError("cannot read free space on /nowhere")
        return SpaceSample(available_bytes=self.available.pop(0), root=root or "/")

    @staticmethod
    def freed_between(before, after):
        return after.available_bytes - before.available_bytes
