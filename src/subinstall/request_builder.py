"""
Install request assembly.

Maps the user's option enums to wire values and applies the unlocked-only
rules: ``upgrade_type`` and ``apex_compile_type`` are sent only when they
differ from the default AND the version is an unlocked package. In every
other case the option is dropped with a warning.
"""

from __future__ import annotations

import logging
from typing import Optional

from .errors import ValidationError
from .messages import get_message
from .models import (
    ApexCompileType,
    InstallRequest,
    SecurityType,
    SubscriberPackageVersion,
    UpgradeType,
)

logger = logging.getLogger(__name__)

DEFAULT_UPGRADE_TYPE = UpgradeType.MIXED
DEFAULT_APEX_COMPILE = ApexCompileType.ALL


def security_type_value(security_type: SecurityType) -> str:
    if security_type == SecurityType.ALL_USERS:
        return "full"
    if security_type == SecurityType.ADMINS_ONLY:
        return "none"
    raise ValidationError(f"Unmapped security type: {security_type!r}")


def upgrade_type_value(upgrade_type: UpgradeType) -> str:
    if upgrade_type == UpgradeType.DELETE:
        return "delete-only"
    if upgrade_type == UpgradeType.DEPRECATE_ONLY:
        return "deprecate-only"
    if upgrade_type == UpgradeType.MIXED:
        return "mixed-mode"
    raise ValidationError(f"Unmapped upgrade type: {upgrade_type!r}")


def apex_compile_value(apex_compile: ApexCompileType) -> str:
    if apex_compile == ApexCompileType.ALL:
        return "all"
    if apex_compile == ApexCompileType.PACKAGE:
        return "package"
    raise ValidationError(f"Unmapped apex compile type: {apex_compile!r}")


def build_install_request(
    version_key: str,
    version: SubscriberPackageVersion,
    security_type: SecurityType,
    upgrade_type: UpgradeType = DEFAULT_UPGRADE_TYPE,
    apex_compile: ApexCompileType = DEFAULT_APEX_COMPILE,
    installation_key: Optional[str] = None,
    enable_external_sites: bool = False,
) -> InstallRequest:
    """Assemble the payload for one install.

    Args:
        version_key: Resolved subscriber package version id.
        version: Fetched version record (decides the unlocked-only rules).
        security_type: Access level for the installed package.
        upgrade_type: Requested upgrade handling.
        apex_compile: Requested Apex compile scope.
        installation_key: Key for protected packages.
        enable_external_sites: Outcome of the external-sites confirmation.

    Returns:
        InstallRequest ready for ``to_payload()``.
    """
    request = InstallRequest(
        subscriber_package_version_key=version_key,
        installation_key=installation_key,
        security_type=security_type_value(security_type),
        enable_external_sites=enable_external_sites,
    )

    if upgrade_type != DEFAULT_UPGRADE_TYPE:
        if version.is_unlocked:
            request.upgrade_type = upgrade_type_value(upgrade_type)
        else:
            logger.warning(get_message("warningUpgradeTypeOnlyForUnlocked"))

    if apex_compile != DEFAULT_APEX_COMPILE:
        if version.is_unlocked:
            request.apex_compile_type = apex_compile_value(apex_compile)
        else:
            logger.warning(get_message("warningApexCompileOnlyForUnlocked"))

    return request
