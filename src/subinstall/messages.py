"""User-facing message catalog.

Keys are grouped by the flow that uses them. ``get_message`` formats
with ``str.format`` positional arguments.
"""

from __future__ import annotations

MESSAGES = {
    # identifier resolution
    "errorRequiredFlags": "Include either a {0} value or a {1} value.",
    "invalidIdOrPackage": (
        "Invalid alias or ID: {0}. Either your alias is invalid or undefined, "
        "or the ID provided is invalid."
    ),
    "invalidRequestId": "Invalid install request ID: {0}.",
    "unsupportedApiVersion": "This command is supported only on API versions 36.0 and higher",
    "invalidApiVersion": "Invalid API version: {0}. Use a number such as 59.0.",
    # confirmation gates
    "promptUpgradeType": (
        "The Delete upgrade type permanently deletes metadata types that have been "
        "removed from the package. Deleted metadata can't be recovered. We don't "
        "delete custom objects and custom fields. Instead, we deprecate them.\n"
        "Do you want to continue? (y/n)"
    ),
    "promptUpgradeTypeDeny": (
        "We canceled this package installation per your request."
    ),
    "promptExternalSites": (
        "This package might send or receive data from these third-party websites:\n\n"
        "{0}\n\n"
        "Grant access (y/n)?"
    ),
    # builder notices
    "warningUpgradeTypeOnlyForUnlocked": (
        "WARNING: We ignored the upgradetype parameter when installing this package "
        "version. The upgradetype parameter is available only for unlocked package versions."
    ),
    "warningApexCompileOnlyForUnlocked": (
        "WARNING: We ignored the apexcompile parameter when installing this package "
        "version. The apexcompile parameter is available only for unlocked package versions."
    ),
    # waiting
    "publishWaitProgress": (
        "Waiting for package {0} to become available. Retries remaining: {1}"
    ),
    "installStatus": "Waiting for the package install request to complete. Status = {0}",
    "createFailed": "Failed to create PackageInstallRequest for: {0}",
    # reports
    "reportSuccess": "Successfully installed package [{0}]",
    "reportPending": (
        "PackageInstallRequest is currently {0}. You can continue to query the status using\n"
        "subinstall report --id {1} --target {2}"
    ),
    "noInstallErrors": "<empty>",
}


def get_message(key: str, *args: object) -> str:
    """Look up a message and fill its placeholders.

    Raises:
        KeyError: If ``key`` is not in the catalog.
    """
    return MESSAGES[key].format(*args)
