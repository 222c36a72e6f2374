"""Subcommand modules for wgmail.

Provides register_commands() which uses deferred imports to keep
``wgmail --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from wgmail.commands.send import send

    cli.add_command(send)
