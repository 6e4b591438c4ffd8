"""Shared utilities for the CLI command modules.

Provides the Rich console instance, the installer factory and the
result/error printers used by every command.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.text import Text

from .. import SUBINSTALL_HOME
from ..client import ToolingClient
from ..config import InstallerConfig, load_config
from ..confirm import ConfirmationGate
from ..installer import PackageInstaller
from ..models import InstallResult
from ..report import human_message

console = Console()


def resolve_config(home: str, target: Optional[str] = None) -> InstallerConfig:
    """Load config from ``home`` and apply the ``--target`` override."""
    config = load_config(Path(home).expanduser())
    if target:
        config.target_name = target
    return config


def build_installer(config: InstallerConfig, no_prompt: bool = False) -> PackageInstaller:
    """Wire a PackageInstaller against the configured org."""
    client = ToolingClient(
        config.instance_url,
        config.access_token,
        api_version=config.api_version,
    )
    gate = ConfirmationGate(no_prompt=no_prompt, console=console)
    return PackageInstaller(client, config=config, gate=gate)


def print_result(result: InstallResult, target_name: str, as_json: bool = False) -> None:
    """Print the final message, or the result as JSON."""
    if as_json:
        payload = {
            "status": result.status,
            "outcome": result.outcome.value,
            "request": result.request.model_dump(by_alias=True),
            "message": human_message(result, target_name),
        }
        click.echo(json.dumps(payload, indent=2))
        return

    message = human_message(result, target_name)
    if message:
        style = "green" if result.status == "SUCCESS" else "yellow"
        console.print(Text(message, style=style))


def fail(exc: Exception) -> NoReturn:
    """Print an error and exit non-zero."""
    console.print(Text(f"ERROR: {exc}", style="bold red"))
    sys.exit(1)


HOME_OPTION = click.option(
    "--home", default=SUBINSTALL_HOME, type=click.Path(), help="Config home directory.",
)
