"""Mintmarket CLI: Typer-based command-line interface.

Provides the ``mintmarket`` command with subcommands for minting assets,
listing and buying them, moving funds, and inspecting the event log.

All output uses Rich for formatted terminal display.
"""
