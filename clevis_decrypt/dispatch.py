"""Pin dispatcher for clevis-decrypt."""

from __future__ import annotations

import logging
from typing import IO, Any, Optional

from .config import DecryptConfig, load_config
from .constants import PLUGIN_ACTION
from .jwe import canonical_dumps, merge_header, read_document
from .launchers import BaseLauncher, get_launcher
from .models import PluginInvocation
from .pins import resolve_target

logger = logging.getLogger(__name__)


class PinDispatcher:
    """Routes a JWE to the plugin named by its ``clevis.pin`` header."""

    def __init__(
        self,
        config: Optional[DecryptConfig] = None,
        launcher: Optional[BaseLauncher] = None,
        path_limit: Optional[int] = None,
    ) -> None:
        self.config = config or load_config()
        self._launcher = launcher
        self._path_limit = path_limit

    @property
    def launcher(self) -> BaseLauncher:
        if self._launcher is None:
            self._launcher = get_launcher(config=self.config)
        return self._launcher

    def prepare(self, document: Any) -> PluginInvocation:
        """Resolve the plugin for ``document`` without starting anything.

        Raises:
            HeaderError: If ``document`` is not shaped like a JWE.
            MissingPinError: If the merged header carries no pin.
            InvalidPinError: If the pin is empty or has forbidden characters.
            PathTooLongError: If the plugin path exceeds the platform limit.
        """
        header = merge_header(document)
        target = resolve_target(header, self.config.cmd_dir, self._path_limit)
        return PluginInvocation(
            target=target,
            argv=[target.path, PLUGIN_ACTION],
            payload=canonical_dumps(document),
        )

    def dispatch(self, document: Any) -> int:
        """Hand ``document`` over to its plugin.

        Returns:
            The plugin's exit status. With the exec launcher this call does
            not return on success.
        """
        invocation = self.prepare(document)
        logger.info(
            "Dispatching JWE to pin %s via %s launcher",
            invocation.target.pin,
            self.launcher.name,
        )
        return self.launcher.launch(invocation)

    def dispatch_stream(self, stream: IO[bytes]) -> int:
        """Read a JWE from ``stream`` and dispatch it."""
        return self.dispatch(read_document(stream))
