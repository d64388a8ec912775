from __future__ import annotations

import logging
import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .constants import CMD_DIR_ENV, CONFIG_ENV, DEFAULT_CMD_DIR, DEFAULT_CONFIG_PATH
from .errors import ConfigError

logger = logging.getLogger(__name__)


class DecryptConfig(BaseModel):
    """Top-level configuration model."""

    model_config = ConfigDict(extra="forbid")

    cmd_dir: str = DEFAULT_CMD_DIR
    launcher: Optional[Literal["exec", "subprocess"]] = None
    log_level: str = "WARNING"

    @field_validator("cmd_dir")
    @classmethod
    def _cmd_dir_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("cmd_dir must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


def is_privileged() -> bool:
    """Return ``True`` when running setuid/setgid.

    Mirrors the ``AT_SECURE`` rule: real and effective ids differ.
    """

    if not hasattr(os, "geteuid"):
        return False
    return os.getuid() != os.geteuid() or os.getgid() != os.getegid()


def secure_getenv(name: str) -> Optional[str]:
    """Read ``name`` from the environment unless the process is privileged.

    Empty values count as unset.
    """

    if is_privileged():
        logger.debug("Ignoring %s: elevated privileges", name)
        return None
    return os.getenv(name) or None


def load_config(path: Optional[str] = None) -> DecryptConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to CLEVIS_DECRYPT_CONFIG
            env variable or /etc/clevis/decrypt.yaml. A missing file yields
            the defaults.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or holds
            unknown keys or invalid values.
    """

    config_path = path or secure_getenv(CONFIG_ENV) or DEFAULT_CONFIG_PATH
    if os.path.exists(config_path):
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot load config {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config {config_path} must be a mapping")
        try:
            config = DecryptConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(
                f"Invalid config {config_path}: {exc.errors()[0]['msg']}"
            ) from exc
        logger.debug("Loaded config from %s", config_path)
    else:
        config = DecryptConfig()

    env_cmd_dir = secure_getenv(CMD_DIR_ENV)
    if env_cmd_dir:
        config.cmd_dir = env_cmd_dir
    return config
