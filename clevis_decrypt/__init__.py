"""clevis-decrypt: hand a JWE over to the pin plugin that can decrypt it."""

from .config import DecryptConfig, load_config
from .dispatch import PinDispatcher
from .errors import (
    ConfigError,
    DispatchError,
    ExecError,
    HeaderError,
    InvalidPinError,
    MissingPinError,
    ParseError,
    PathTooLongError,
    SpawnError,
    UsageError,
)
from .launchers import get_launcher
from .models import PluginInvocation, PluginTarget

__version__ = "0.1.0"
__all__ = [
    "ConfigError",
    "DecryptConfig",
    "DispatchError",
    "ExecError",
    "HeaderError",
    "InvalidPinError",
    "MissingPinError",
    "ParseError",
    "PathTooLongError",
    "PinDispatcher",
    "PluginInvocation",
    "PluginTarget",
    "SpawnError",
    "UsageError",
    "get_launcher",
    "load_config",
]
