"""CLI wrapper: Format the codec sources with ruff."""

from __future__ import annotations

from cli._runner import run_ruff


def main() -> None:
    run_ruff("format")
