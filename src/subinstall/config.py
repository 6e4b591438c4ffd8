"""
Installer configuration.

Loaded from ``<home>/config.yaml`` and then overridden by environment
variables, so CI jobs can run without a config file:

    SUBINSTALL_INSTANCE_URL, SUBINSTALL_ACCESS_TOKEN,
    SUBINSTALL_API_VERSION, SUBINSTALL_TARGET
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from . import SUBINSTALL_HOME
from .errors import ValidationError
from .messages import get_message

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MILLIS = 5000
PUBLISH_POLL_INTERVAL_MILLIS = 10000
MIN_API_VERSION = 36.0

_ENV_OVERRIDES = {
    "SUBINSTALL_INSTANCE_URL": "instance_url",
    "SUBINSTALL_ACCESS_TOKEN": "access_token",
    "SUBINSTALL_API_VERSION": "api_version",
    "SUBINSTALL_TARGET": "target_name",
}


class InstallerConfig(BaseModel):
    """Connection and polling settings for one target org."""

    instance_url: str = ""
    access_token: str = ""
    api_version: str = "59.0"
    target_name: str = "default"
    poll_interval_millis: int = Field(default=DEFAULT_POLL_INTERVAL_MILLIS, gt=0)
    publish_poll_interval_millis: int = Field(default=PUBLISH_POLL_INTERVAL_MILLIS, gt=0)
    package_aliases: Dict[str, str] = Field(default_factory=dict)

    @field_validator("api_version", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        """YAML reads `api_version: 59.0` as a float."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(float(value))
        return value

    @property
    def api_version_number(self) -> float:
        """Numeric API version.

        Raises:
            ValidationError: If ``api_version`` is not a number.
        """
        try:
            return float(self.api_version)
        except ValueError:
            raise ValidationError(
                get_message("invalidApiVersion", self.api_version), value=self.api_version,
            ) from None


def config_path(home: Optional[Path] = None) -> Path:
    """Location of the YAML config file."""
    return (home or Path(SUBINSTALL_HOME)).expanduser() / "config.yaml"


def load_config(home: Optional[Path] = None) -> InstallerConfig:
    """Load configuration from disk and the environment.

    A missing or unreadable config file falls back to defaults. The
    environment applies on top, also when the file holds invalid values.

    Args:
        home: Override the config home. Defaults to ~/.subinstall/.

    Returns:
        InstallerConfig with environment overrides applied.
    """
    data: dict = {}
    path = config_path(home)
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as exc:
            logger.warning("Failed to load config: %s; using defaults", exc)
            data = {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", path)
            data = {}

    overrides = {
        field_name: os.environ[env_var]
        for env_var, field_name in _ENV_OVERRIDES.items()
        if os.environ.get(env_var)
    }

    try:
        return InstallerConfig(**{**data, **overrides})
    except ValueError as exc:
        logger.warning("Invalid config in %s: %s; using defaults plus environment", path, exc)
        return InstallerConfig(**overrides)
