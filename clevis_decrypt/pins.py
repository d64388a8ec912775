"""Pin identifier extraction, validation and plugin path resolution.

The pin name read from the JWE header is untrusted input that ends up in a
filesystem path and an exec call, so it is restricted to ASCII letters,
digits and hyphens before anything else touches it.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Mapping, Optional

from .constants import (
    FALLBACK_PATH_MAX,
    LEGACY_PIN_HEADER_KEY,
    PIN_HEADER_KEY,
    PINS_SEGMENT,
)
from .errors import InvalidPinError, MissingPinError, PathTooLongError
from .models import PluginTarget

logger = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r"[A-Za-z0-9-]+")


def extract_pin(header: Mapping[str, Any]) -> str:
    """Return the pin recorded under ``clevis.pin`` in a merged header."""
    outer, inner = PIN_HEADER_KEY
    section = header.get(outer)
    if isinstance(section, Mapping) and inner in section:
        pin = section[inner]
    elif LEGACY_PIN_HEADER_KEY in header:
        pin = header[LEGACY_PIN_HEADER_KEY]
    else:
        raise MissingPinError("JWE header missing clevis.pin!")

    if not isinstance(pin, str):
        raise MissingPinError("JWE header clevis.pin is not a string!")
    return pin


def validate_pin(pin: str) -> str:
    if not pin:
        raise InvalidPinError("Empty pin name", pin)
    if not PIN_PATTERN.fullmatch(pin):
        raise InvalidPinError(f"Invalid pin name: {pin!r}", pin)
    return pin


def path_max(directory: str) -> int:
    """Maximum path length on the filesystem holding ``directory``."""
    try:
        limit = os.pathconf(directory, "PC_PATH_MAX")
    except (AttributeError, OSError, ValueError):
        return FALLBACK_PATH_MAX
    return limit if limit > 0 else FALLBACK_PATH_MAX


def build_plugin_path(
    cmd_dir: str, pin: str, limit: Optional[int] = None
) -> str:
    """Join ``cmd_dir``, the pins segment and ``pin``.

    ``pin`` must already be validated. The result, encoded for the
    filesystem, has to fit in ``limit`` bytes including the terminator.
    """

    path = os.path.join(cmd_dir, PINS_SEGMENT, pin)
    limit = limit if limit is not None else path_max(cmd_dir)
    if len(os.fsencode(path)) >= limit:
        raise PathTooLongError(
            f"Plugin path for pin {pin!r} exceeds the {limit} byte path limit"
        )
    return path


def resolve_target(
    header: Mapping[str, Any], cmd_dir: str, limit: Optional[int] = None
) -> PluginTarget:
    """Extract, validate and resolve the pin from a merged header."""
    pin = validate_pin(extract_pin(header))
    logger.debug("JWE pin: %s", pin)
    path = build_plugin_path(cmd_dir, pin, limit)
    logger.debug("Resolved pin %s to %s", pin, path)
    return PluginTarget(pin=pin, cmd_dir=cmd_dir, path=path)


__all__ = [
    "PIN_PATTERN",
    "build_plugin_path",
    "extract_pin",
    "path_max",
    "resolve_target",
    "validate_pin",
]
