"""Error taxonomy for the decryption dispatcher."""

from __future__ import annotations

import os


class DispatchError(Exception):
    """Base class for every failure that aborts a dispatch.

    Each subclass carries the process exit status the CLI reports for it.
    """

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UsageError(DispatchError):
    exit_code = 2


class ConfigError(DispatchError):
    exit_code = getattr(os, "EX_CONFIG", 78)


class ParseError(DispatchError):
    """Standard input is unreadable or not a JSON document."""

    exit_code = getattr(os, "EX_DATAERR", 65)


class HeaderError(DispatchError):
    """The document is not shaped like a JWE, so no header can be merged."""

    exit_code = getattr(os, "EX_DATAERR", 65)


class MissingPinError(DispatchError):
    exit_code = getattr(os, "EX_DATAERR", 65)


class InvalidPinError(DispatchError):
    """The pin identifier is empty or uses characters outside ``[A-Za-z0-9-]``."""

    exit_code = getattr(os, "EX_DATAERR", 65)

    def __init__(self, message: str, pin: str) -> None:
        super().__init__(message)
        self.pin = pin


class PathTooLongError(DispatchError):
    exit_code = getattr(os, "EX_DATAERR", 65)


class SpawnError(DispatchError):
    """Creating the pipe or the writer process failed."""

    exit_code = getattr(os, "EX_OSERR", 71)


class ExecError(DispatchError):
    """The plugin executable could not be invoked."""

    exit_code = 126


__all__ = [
    "DispatchError",
    "UsageError",
    "ConfigError",
    "ParseError",
    "HeaderError",
    "MissingPinError",
    "InvalidPinError",
    "PathTooLongError",
    "SpawnError",
    "ExecError",
]
