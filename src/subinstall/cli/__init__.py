"""
subinstall CLI — install packages into a target org.

The main Click group is defined here and every subcommand module
registers itself through a ``register_*_commands`` function.

Entry point: subinstall.cli:main
"""

from __future__ import annotations

import logging

import click

from .. import __version__

_FMT_DEFAULT = "%(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="subinstall")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def main(quiet: bool, debug: bool):
    """subinstall — install package versions into a target org.

    Creates an install request, waits for it, and tells you how it went.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format=_FMT_DEBUG)
    else:
        logging.basicConfig(
            level=logging.WARNING if quiet else logging.INFO, format=_FMT_DEFAULT,
        )


# ---------------------------------------------------------------------------
# Register all command groups/commands from modular files
# ---------------------------------------------------------------------------

from .install import register_install_commands
from .config_cmd import register_config_commands

register_install_commands(main)
register_config_commands(main)
