#!/usr/bin/env python3
"""Elevated-privilege session: one sudo prompt, kept alive for the whole sweep."""
from __future__ import annotations

import logging
import os
import subprocess
import threading
from typing import List, Optional, Sequence

from ..core.constants import KEEPALIVE_INTERVAL
from ..core.errors import AuthorizationError

logger = logging.getLogger(__name__)


def _is_root() -> bool:
    return os.geteuid() == 0


def _sudo(args: Sequence[str], interactive: bool = False, timeout: Optional[float] = None) -> bool:
    """Run sudo with args. Returns True on exit status 0."""
    kwargs = {}
    if not interactive:
        kwargs = {"stdin": subprocess.DEVNULL, "stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
    try:
        subprocess.run(["sudo", *args], check=True, timeout=timeout, **kwargs)
        return True
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False


class PrivilegeSession:
    """Holds sudo credentials for the run.

    `acquire()` prompts once; a daemon thread then re-validates the cached
    credentials every `renewal_interval` seconds until `release()` or until
    its owner is gone. Renewal failures are ignored: the grant may expire on
    its own and per-path deletions then fail softly.
    """

    def __init__(self, renewal_interval: int = KEEPALIVE_INTERVAL):
        self.renewal_interval = renewal_interval
        self.active = False
        self.owner_pid: Optional[int] = None
        self._via_sudo = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def acquire(self) -> None:
        if self.active:
            return
        if _is_root():
            logger.debug("Already running as root; no sudo prompt needed")
            self._via_sudo = False
        else:
            logger.debug("Requesting sudo credentials")
            if not _sudo(["-v"], interactive=True):
                raise AuthorizationError("sudo authentication failed or was declined")
            self._via_sudo = True
        self.owner_pid = os.getpid()
        self.active = True
        if self._via_sudo:
            self._start_renewal()

    def _start_renewal(self) -> None:
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._renew_loop,
            args=(self._stop, self.owner_pid),
            name="sudo-keepalive",
            daemon=True,
        )
        self._thread.start()

    def _owner_alive(self, owner_pid: Optional[int]) -> bool:
        return owner_pid == os.getpid() and threading.main_thread().is_alive()

    def _renew_loop(self, stop: threading.Event, owner_pid: Optional[int]) -> None:
        while not stop.wait(self.renewal_interval):
            if not self._owner_alive(owner_pid):
                logger.debug("Owner gone; stopping sudo keep-alive")
                return
            _sudo(["-n", "-v"], timeout=self.renewal_interval)

    def release(self) -> None:
        """Stop renewal and drop cached credentials. Safe to call repeatedly."""
        if not self.active:
            return
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=5)
        if self._via_sudo:
            _sudo(["-k"], timeout=10)
        logger.debug("Privilege session released")
        self.active = False
        self.owner_pid = None
        self._via_sudo = False

    def privileged(self, argv: Sequence[str]) -> List[str]:
        """Prefix argv with non-interactive sudo unless already root."""
        if _is_root():
            return list(argv)
        return ["sudo", "-n", *argv]

