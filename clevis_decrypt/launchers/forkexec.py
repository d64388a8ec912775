"""Launcher that replaces the current process with the plugin.

A forked writer pushes the JWE into a pipe while the parent moves the pipe's
read end onto its own stdin and execs the plugin, so the plugin can read its
input while this process disappears.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from typing import Dict, NoReturn

from ..errors import ExecError, SpawnError
from ..models import PluginInvocation
from .base import BaseLauncher

logger = logging.getLogger(__name__)

STDIN_FILENO = 0

# Ignored by the interpreter at startup; exec would pass that on to plugins.
INHERITED_IGNORED_SIGNALS = ("SIGPIPE", "SIGXFSZ")


def _restore_default_signals() -> Dict[int, object]:
    """Reset interpreter-ignored signals to SIG_DFL, returning the old handlers."""
    previous = {}
    for name in INHERITED_IGNORED_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is not None:
            previous[signum] = signal.signal(signum, signal.SIG_DFL)
    return previous


def _write_and_exit(read_fd: int, write_fd: int, payload: bytes) -> NoReturn:
    """Body of the forked writer; never returns into the caller."""
    status = 1
    try:
        os.close(read_fd)
        with os.fdopen(write_fd, "wb") as stream:
            stream.write(payload)
        status = 0
    except OSError:
        status = 1
    finally:
        os._exit(status)


class ExecLauncher(BaseLauncher):
    """fork, write in the child, exec in the parent."""

    name = "exec"

    def launch(self, invocation: PluginInvocation) -> int:
        try:
            read_fd, write_fd = os.pipe()
        except OSError as exc:
            raise SpawnError(f"Cannot create pipe: {exc}") from exc

        # Nothing may stay buffered across fork and exec.
        sys.stdout.flush()
        sys.stderr.flush()

        try:
            pid = os.fork()
        except OSError as exc:
            os.close(read_fd)
            os.close(write_fd)
            raise SpawnError(f"Cannot fork JWE writer: {exc}") from exc

        if pid == 0:
            _write_and_exit(read_fd, write_fd, invocation.payload)

        logger.debug("JWE writer running as pid %d", pid)
        try:
            if read_fd != STDIN_FILENO:
                os.dup2(read_fd, STDIN_FILENO)
                os.close(read_fd)
            os.close(write_fd)
        except OSError as exc:
            raise SpawnError(f"Cannot attach pipe to stdin: {exc}") from exc

        logger.debug("Executing %s", " ".join(invocation.argv))
        previous = _restore_default_signals()
        try:
            os.execv(invocation.executable, invocation.argv)
        except (OSError, ValueError) as exc:
            for signum, handler in previous.items():
                if handler is not None:
                    signal.signal(signum, handler)
            raise ExecError(f"Cannot execute {invocation.executable}: {exc}") from exc
        raise AssertionError("os.execv returned")  # pragma: no cover
