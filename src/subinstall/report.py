"""Human-readable install results and remote error aggregation."""

from __future__ import annotations

from typing import Sequence

from .messages import get_message
from .models import InstallResult, InstallStatus


def format_install_errors(errors: Sequence[str]) -> str:
    """Number the remote errors, one per line.

    Returns ``<empty>`` when the server sent no structured errors.
    """
    if not errors:
        return get_message("noInstallErrors")
    lines = "".join(f"\n{i}) {msg}" for i, msg in enumerate(errors, start=1))
    return f"Installation errors: {lines}"


def human_message(result: InstallResult, target_name: str) -> str:
    """Message shown to the user once polling stops.

    Args:
        result: Final poll result.
        target_name: Name of the org the package went into.
    """
    request = result.request
    if request.status == InstallStatus.SUCCESS.value:
        return get_message("reportSuccess", request.subscriber_package_version_key)
    if request.status == InstallStatus.TERMINATED.value:
        return ""
    return get_message("reportPending", request.status, request.id, target_name)
