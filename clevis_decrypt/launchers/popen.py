"""Launcher that runs the plugin as a child and waits for it."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import IO

from ..errors import ExecError
from ..models import PluginInvocation
from .base import BaseLauncher

logger = logging.getLogger(__name__)


def _feed(stream: IO[bytes], payload: bytes) -> None:
    """Write ``payload`` and close ``stream``.

    A plugin is free to exit without reading its input; the resulting broken
    pipe only ends the write.
    """
    try:
        stream.write(payload)
    except BrokenPipeError:
        logger.debug("Plugin closed stdin before reading the whole JWE")
    except OSError as exc:
        logger.debug("Cannot write JWE to plugin: %s", exc)
    finally:
        try:
            stream.close()
        except OSError as exc:
            logger.debug("Cannot close plugin stdin: %s", exc)


class SubprocessLauncher(BaseLauncher):
    """Spawn the plugin with a piped stdin and propagate its exit status.

    The plugin inherits this process's stdout, stderr and environment.
    """

    name = "subprocess"

    def launch(self, invocation: PluginInvocation) -> int:
        try:
            process = subprocess.Popen(
                invocation.argv,
                executable=invocation.executable,
                stdin=subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            raise ExecError(f"Cannot execute {invocation.executable}: {exc}") from exc

        writer = threading.Thread(
            target=_feed,
            args=(process.stdin, invocation.payload),
            name="jwe-writer",
            daemon=True,
        )
        writer.start()
        returncode = process.wait()
        writer.join()

        logger.debug("Plugin %s exited with %d", invocation.target.pin, returncode)
        if returncode < 0:
            logger.debug("Plugin terminated by signal %d", -returncode)
            return 128 - returncode
        return returncode
