import stat
import textwrap
from pathlib import Path
from typing import Callable, List

import pytest

from clevis_decrypt import config
from clevis_decrypt.launchers import BaseLauncher
from clevis_decrypt.models import PluginInvocation


class RecordingLauncher(BaseLauncher):
    """Launcher that records invocations instead of starting anything."""

    name = "recording"

    def __init__(self, status: int = 0) -> None:
        self.status = status
        self.invocations: List[PluginInvocation] = []

    def launch(self, invocation: PluginInvocation) -> int:
        self.invocations.append(invocation)
        return self.status


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep host configuration out of the tests."""
    monkeypatch.delenv("CLEVIS_CMD_DIR", raising=False)
    monkeypatch.delenv("CLEVIS_DECRYPT_CONFIG", raising=False)
    monkeypatch.setattr(
        config, "DEFAULT_CONFIG_PATH", str(tmp_path / "no-such-config.yaml")
    )


@pytest.fixture
def recording_launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture
def write_plugin() -> Callable[[Path, str, str], Path]:
    """Return a helper that installs ``<cmd_dir>/pins/<pin>`` as a /bin/sh script."""

    def _write_plugin(cmd_dir: Path, pin: str, body: str) -> Path:
        pins_dir = cmd_dir / "pins"
        pins_dir.mkdir(parents=True, exist_ok=True)
        plugin = pins_dir / pin
        plugin.write_text("#!/bin/sh\n" + textwrap.dedent(body).lstrip())
        plugin.chmod(plugin.stat().st_mode | stat.S_IXUSR)
        return plugin

    return _write_plugin
