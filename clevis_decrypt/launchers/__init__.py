"""Launcher factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import DecryptConfig, load_config
from ..errors import ConfigError
from .base import BaseLauncher
from .forkexec import ExecLauncher
from .popen import SubprocessLauncher


def default_launcher_name() -> str:
    return "exec" if hasattr(os, "fork") else "subprocess"


def get_launcher(
    name: Optional[str] = None, config: Optional[DecryptConfig] = None
) -> BaseLauncher:
    """Factory function to get the configured launcher."""

    config = config or load_config()
    name = (name or config.launcher or default_launcher_name()).lower()

    if name == "exec":
        if not hasattr(os, "fork"):
            raise ConfigError("The exec launcher needs fork(), unavailable here")
        return ExecLauncher()
    elif name == "subprocess":
        return SubprocessLauncher()
    else:
        raise ConfigError(f"Unsupported launcher: {name}")


__all__ = [
    "BaseLauncher",
    "ExecLauncher",
    "SubprocessLauncher",
    "default_launcher_name",
    "get_launcher",
]
