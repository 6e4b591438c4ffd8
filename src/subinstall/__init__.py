"""
subinstall — install versioned packages into a remote org.

Creates a server-side install request for a subscriber package
version, then polls it until the remote side reports a terminal
status or the wait budget runs out.
"""

import os

__version__ = "0.1.0"
__author__ = "smilinTux"

SUBINSTALL_HOME = os.environ.get("SUBINSTALL_HOME", "~/.subinstall")
