"""Base launcher interface for handing a JWE over to a pin plugin."""

from __future__ import annotations

import abc

from ..models import PluginInvocation


class BaseLauncher(metaclass=abc.ABCMeta):
    """Abstract strategy that feeds the canonical JWE to a plugin."""

    name: str = "base"

    @abc.abstractmethod
    def launch(self, invocation: PluginInvocation) -> int:
        """Start the plugin with ``invocation.payload`` on its stdin.

        Returns the plugin's exit status. Launchers that replace the current
        process image do not return on success.
        """
        raise NotImplementedError
