"""Config commands: show."""

from __future__ import annotations

import click
from rich.table import Table

from ._common import HOME_OPTION, console, resolve_config
from ..config import config_path


def _mask(secret: str) -> str:
    if not secret:
        return "[dim]not set[/]"
    return f"{secret[:4]}…" if len(secret) > 8 else "****"


def register_config_commands(main: click.Group) -> None:
    """Register the config command group."""

    @main.group()
    def config():
        """Inspect installer configuration."""

    @config.command("show")
    @click.option("--target", "-u", default=None, help="Override the target org name.")
    @HOME_OPTION
    def config_show(target, home):
        """Show the effective configuration (file + environment)."""
        from pathlib import Path

        cfg = resolve_config(home, target)

        table = Table(title="subinstall config", show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        table.add_row("config file", str(config_path(Path(home).expanduser())))
        table.add_row("instance_url", cfg.instance_url or "[dim]not set[/]")
        table.add_row("access_token", _mask(cfg.access_token))
        table.add_row("api_version", cfg.api_version)
        table.add_row("target_name", cfg.target_name)
        table.add_row("poll_interval_millis", str(cfg.poll_interval_millis))
        table.add_row("publish_poll_interval_millis", str(cfg.publish_poll_interval_millis))
        table.add_row("package_aliases", str(len(cfg.package_aliases)))

        console.print()
        console.print(table)
        console.print()
