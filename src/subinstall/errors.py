"""Exception hierarchy for package installation.

Everything the install flow raises on purpose derives from
``InstallError`` so the CLI can report it with a single handler.
Transport failures live in ``client.py`` as ``ApiError``.
"""

from __future__ import annotations

from typing import List, Optional


class InstallError(Exception):
    """Base class for install failures."""


class ValidationError(InstallError):
    """Raised when user input is rejected before any remote call."""

    def __init__(self, message: str, value: Optional[str] = None) -> None:
        super().__init__(message)
        self.value = value


class UnsupportedApiVersionError(ValidationError):
    """Raised when the configured API version is too old to install packages."""


class ConfigError(InstallError):
    """Raised when a configuration or project file cannot be read."""


class PromptDeniedError(InstallError):
    """Raised when the user declines a confirmation that gates the install."""


class CreationError(InstallError):
    """Raised when the remote create call returns no request id."""


class RemoteInstallError(InstallError):
    """Raised when the install request finishes with status ERROR.

    Args:
        message: Aggregated, human-readable error message.
        errors: The individual error messages reported by the remote side.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])
