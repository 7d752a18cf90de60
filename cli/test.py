"""CLI wrapper: Run the codec unit tests."""

from __future__ import annotations

from cli._runner import run_module


def main() -> None:
    run_module("pytest", "-q")
