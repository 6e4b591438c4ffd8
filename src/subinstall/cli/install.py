"""Install commands: install, report."""

from __future__ import annotations

import asyncio

import click

from ._common import HOME_OPTION, build_installer, console, fail, print_result, resolve_config
from ..client import ApiError
from ..errors import InstallError
from ..models import ApexCompileType, SecurityType, UpgradeType


def _choices(enum_cls) -> click.Choice:
    return click.Choice([m.value for m in enum_cls])


def register_install_commands(main: click.Group) -> None:
    """Register the install and report commands."""

    @main.command("install")
    @click.option("--id", "-i", "version_id", default=None, help="ID of the package version to install (starts with 04t).")
    @click.option("--package", "-p", default=None, help="Alias or ID of the package version to install.")
    @click.option("--installationkey", "-k", "installation_key", default=None, help="Installation key for a key-protected package.")
    @click.option("--wait", "-w", type=click.FloatRange(min=0), default=None, help="Minutes to wait for the install to finish.")
    @click.option("--publishwait", "-b", "publish_wait", type=click.FloatRange(min=0), default=0, show_default=True, help="Minutes to wait for the version to become available.")
    @click.option("--upgradetype", "-t", "upgrade_type", type=_choices(UpgradeType), default=UpgradeType.MIXED.value, show_default=True, help="Upgrade type (unlocked packages only).")
    @click.option("--apexcompile", "-a", "apex_compile", type=_choices(ApexCompileType), default=ApexCompileType.ALL.value, show_default=True, help="Apex compile scope (unlocked packages only).")
    @click.option("--securitytype", "-s", "security_type", type=_choices(SecurityType), default=SecurityType.ADMINS_ONLY.value, show_default=True, help="Who gets access to the package.")
    @click.option("--noprompt", "-r", "no_prompt", is_flag=True, help="Do not ask for confirmation.")
    @click.option("--target", "-u", default=None, help="Name of the target org (used in reports).")
    @click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
    @HOME_OPTION
    def install(version_id, package, installation_key, wait, publish_wait, upgrade_type,
                apex_compile, security_type, no_prompt, target, as_json, home):
        """Install a package version into the target org.

        Examples:

            subinstall install --id 04t000000000001AAA --wait 10

            subinstall install --package my-pkg@1.2.0-1 --upgradetype Delete --noprompt
        """
        from ..installer import InstallOptions

        config = resolve_config(home, target)
        installer = build_installer(config, no_prompt=no_prompt)
        options = InstallOptions(
            version_id=version_id,
            package=package,
            installation_key=installation_key,
            wait=wait,
            publish_wait=publish_wait,
            upgrade_type=upgrade_type,
            apex_compile=apex_compile,
            security_type=security_type,
            no_prompt=no_prompt,
        )

        if not as_json:
            console.print(f"\n  Installing into [cyan]{config.target_name}[/]...")
        try:
            result = asyncio.run(installer.install(options))
        except (InstallError, ApiError) as exc:
            fail(exc)

        print_result(result, config.target_name, as_json=as_json)

    @main.command("report")
    @click.option("--id", "-i", "request_id", required=True, help="ID of the install request (starts with 0Hf).")
    @click.option("--wait", "-w", type=click.FloatRange(min=0), default=None, help="Minutes to keep polling.")
    @click.option("--target", "-u", default=None, help="Name of the target org (used in reports).")
    @click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
    @HOME_OPTION
    def report(request_id, wait, target, as_json, home):
        """Show the status of an install request."""
        config = resolve_config(home, target)
        installer = build_installer(config)
        try:
            result = asyncio.run(installer.report(request_id, wait=wait))
        except (InstallError, ApiError) as exc:
            fail(exc)

        print_result(result, config.target_name, as_json=as_json)
