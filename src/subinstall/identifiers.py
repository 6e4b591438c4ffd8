"""
Identifier resolution — turn ``--id`` / ``--package`` into one version key.

Exactly one of the two flags must be given. ``--package`` may carry a
direct id (starts with ``04t``) or an alias, which is looked up in the
project's ``sfdx-project.json`` and then in the config's
``package_aliases``. Whatever comes out is checked against the id shape.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .errors import ConfigError, ValidationError
from .messages import get_message

logger = logging.getLogger(__name__)

PROJECT_FILE = "sfdx-project.json"


@dataclass(frozen=True)
class IdType:
    """Shape of one kind of record id."""

    label: str
    prefix: str

    def matches(self, value: Optional[str]) -> bool:
        if not value or len(value) not in (15, 18):
            return False
        return value.startswith(self.prefix) and re.fullmatch(r"[A-Za-z0-9]+", value) is not None


SUBSCRIBER_PACKAGE_VERSION_ID = IdType("SubscriberPackageVersionId", "04t")
PACKAGE_INSTALL_REQUEST_ID = IdType("PackageInstallRequestId", "0Hf")

ID_FLAG = "--id (-i)"
PACKAGE_FLAG = "--package"


class AliasStore:
    """Alias → id lookup over the project file and the config aliases.

    Args:
        config_aliases: Aliases from the installer config.
        project_dir: Directory holding ``sfdx-project.json``.
    """

    def __init__(
        self,
        config_aliases: Optional[Dict[str, str]] = None,
        project_dir: Optional[Path] = None,
    ) -> None:
        self._config_aliases = dict(config_aliases or {})
        self._project_dir = project_dir or Path.cwd()

    def _project_aliases(self) -> Dict[str, str]:
        path = self._project_dir / PROJECT_FILE
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc
        aliases = data.get("packageAliases") if isinstance(data, dict) else None
        return aliases if isinstance(aliases, dict) else {}

    def resolve(self, alias: str) -> str:
        """Return the id for ``alias``, or the alias itself if unknown."""
        aliases = {**self._config_aliases, **self._project_aliases()}
        resolved = aliases.get(alias, alias)
        if resolved != alias:
            logger.debug("Resolved alias %s -> %s", alias, resolved)
        return resolved


class IdentifierResolver:
    """Resolve the mutually exclusive id flags to a version key."""

    def __init__(self, aliases: Optional[AliasStore] = None) -> None:
        self._aliases = aliases or AliasStore()

    def resolve(self, version_id: Optional[str], package: Optional[str]) -> str:
        """Resolve and validate the version key.

        Args:
            version_id: Value of ``--id``.
            package: Value of ``--package`` (alias or id).

        Returns:
            A validated subscriber package version id.

        Raises:
            ValidationError: If neither or both flags are set, or the
                resolved value is not a version id.
            ConfigError: If the alias source cannot be read.
        """
        if bool(version_id) == bool(package):
            raise ValidationError(get_message("errorRequiredFlags", ID_FLAG, PACKAGE_FLAG))

        if version_id:
            resolved = version_id
        elif package.startswith(SUBSCRIBER_PACKAGE_VERSION_ID.prefix):
            resolved = package
        else:
            resolved = self._aliases.resolve(package)

        validate_id(SUBSCRIBER_PACKAGE_VERSION_ID, resolved)
        return resolved


def validate_id(id_type: IdType, value: Optional[str]) -> str:
    """Check ``value`` against ``id_type``.

    Raises:
        ValidationError: Carrying the offending value.
    """
    if not id_type.matches(value):
        key = "invalidIdOrPackage" if id_type is SUBSCRIBER_PACKAGE_VERSION_ID else "invalidRequestId"
        raise ValidationError(get_message(key, value), value=value)
    return value
