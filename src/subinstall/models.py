"""
Pydantic models for install requests and the remote resources they touch.

Remote records arrive with the server's PascalCase field names; the
models accept those via aliases and expose snake_case attributes.
Optional payload fields stay ``None`` until a rule sets them and are
dropped from the wire payload.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNLOCKED_CONTAINER = "Unlocked"
PACKAGE_UNAVAILABLE = "PACKAGE_UNAVAILABLE"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SecurityType(str, Enum):
    """Who gets access to the installed package."""

    ALL_USERS = "AllUsers"
    ADMINS_ONLY = "AdminsOnly"


class UpgradeType(str, Enum):
    """How removed metadata is handled when upgrading an unlocked package."""

    DELETE = "Delete"
    DEPRECATE_ONLY = "DeprecateOnly"
    MIXED = "Mixed"


class ApexCompileType(str, Enum):
    """Which Apex is compiled during install of an unlocked package."""

    ALL = "all"
    PACKAGE = "package"


class InstallStatus(str, Enum):
    """Status values of a remote install request.

    ``TERMINATED`` never comes from the server; callers use it to mark
    an install they abandoned themselves.
    """

    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"
    TERMINATED = "TERMINATED"


class InstallOutcome(str, Enum):
    """How a poll loop ended."""

    SUCCESS = "success"
    TIMED_OUT = "timed_out"


# ---------------------------------------------------------------------------
# Outgoing payload
# ---------------------------------------------------------------------------

class InstallRequest(BaseModel):
    """Payload used to create a remote install request."""

    model_config = ConfigDict(populate_by_name=True)

    subscriber_package_version_key: str = Field(
        serialization_alias="SubscriberPackageVersionKey",
    )
    # The server still calls the installation key "Password".
    installation_key: Optional[str] = Field(default=None, serialization_alias="Password")
    upgrade_type: Optional[str] = Field(default=None, serialization_alias="UpgradeType")
    apex_compile_type: Optional[str] = Field(
        default=None, serialization_alias="ApexCompileType",
    )
    security_type: str = Field(serialization_alias="SecurityType")
    name_conflict_resolution: str = Field(
        default="Block", serialization_alias="NameConflictResolution",
    )
    package_install_source: str = Field(
        default="U", serialization_alias="PackageInstallSource",
    )
    enable_external_sites: bool = Field(default=False, serialization_alias="EnableRss")

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation with unset optional fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Remote resources
# ---------------------------------------------------------------------------

def _site_urls(block: Any, key: str) -> List[str]:
    if not isinstance(block, dict):
        return []
    return [s[key] for s in block.get("settings") or [] if s.get(key)]


class SubscriberPackageVersion(BaseModel):
    """Read-only view of the package version about to be installed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="Id")
    container_options: Optional[str] = Field(default=None, alias="Package2ContainerOptions")
    install_validation_status: Optional[str] = Field(
        default=None, alias="InstallValidationStatus",
    )
    trusted_sites: List[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "SubscriberPackageVersion":
        """Build from a raw record, collecting remote-site and CSP URLs."""
        sites = _site_urls(record.get("RemoteSiteSettings"), "url")
        sites += _site_urls(record.get("CspTrustedSites"), "endpointUrl")
        return cls.model_validate({**record, "trusted_sites": sites})

    @property
    def is_unlocked(self) -> bool:
        return self.container_options == UNLOCKED_CONTAINER

    @property
    def publish_ready(self) -> bool:
        """False while the version is still replicating to the target instance."""
        return self.install_validation_status != PACKAGE_UNAVAILABLE


class PackageInstallRequest(BaseModel):
    """Remote install request as returned by a retrieve call."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="Id")
    status: str = Field(default=InstallStatus.UNKNOWN.value, alias="Status")
    subscriber_package_version_key: Optional[str] = Field(
        default=None, alias="SubscriberPackageVersionKey",
    )
    errors: List[str] = Field(default_factory=list, alias="Errors")

    @field_validator("errors", mode="before")
    @classmethod
    def _flatten_errors(cls, value: Any) -> List[str]:
        """Accept the server's ``{"errors": [{"message": ...}]}`` shape."""
        if value is None:
            return []
        if isinstance(value, dict):
            value = value.get("errors") or []
        return [e.get("message", "") if isinstance(e, dict) else str(e) for e in value]

    @property
    def is_terminal(self) -> bool:
        return self.status in (InstallStatus.SUCCESS.value, InstallStatus.ERROR.value)


class InstallResult(BaseModel):
    """Final resource of a poll loop and how the loop ended."""

    request: PackageInstallRequest
    outcome: InstallOutcome

    @property
    def status(self) -> str:
        return self.request.status

    @property
    def timed_out(self) -> bool:
        return self.outcome == InstallOutcome.TIMED_OUT
