"""
Shared runner for the codec's developer commands.

Every wrapper runs a tool module under the current interpreter over the
codec sources and exits with the tool's return code.
"""

from __future__ import annotations

import subprocess
import sys

# Trees checked by ruff
SOURCE_PATHS = ("endorsement_policy", "tests", "cli")


def run_module(module: str, *args: str) -> None:
    """
    Run `python -m <module>` and exit with its return code.

    Arguments given on the command line are appended after `args`.

    Example:
        >>> run_module("pytest", "-q")
    """
    result = subprocess.run([sys.executable, "-m", module, *args, *sys.argv[1:]])
    raise SystemExit(result.returncode)


def run_ruff(subcommand: str) -> None:
    """Run a ruff subcommand over the codec sources."""
    run_module("ruff", subcommand, *SOURCE_PATHS)
