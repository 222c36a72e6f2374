"""Command: mail peer configurations to their owners."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wgmail.commands._base import WgMailCommand

if TYPE_CHECKING:
    from wgmail.commands._context import AppContext


def _parse_private_keys(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    keys: dict[str, str] = {}
    for value in values:
        peer_id, sep, key = value.partition("=")
        if not sep or not peer_id or not key:
            raise click.BadParameter(f"expected PEER_ID=KEY, got {value!r}")
        keys[peer_id] = key
    return keys


@click.command(
    cls=WgMailCommand,
    examples="""\
  wgmail send peer-1 peer-2
  wgmail send --link-only peer-1
  wgmail send --private-key peer-1=<base64 key> peer-1
  wgmail --json send --as-user alice --no-admin peer-1""",
)
@click.argument("peer_ids", nargs=-1, required=True)
@click.option("--link-only", is_flag=True, help="Send a link instead of the configuration.")
@click.option(
    "--private-key",
    "private_keys",
    multiple=True,
    callback=_parse_private_keys,
    metavar="PEER_ID=KEY",
    help="Private key to put into the peer's configuration (not stored).",
)
@click.option("--as-user", default="cli", show_default=True, help="Acting user identifier.")
@click.option("--admin/--no-admin", default=True, show_default=True, help="Act with admin rights.")
@click.pass_obj
def send(
    app: AppContext,
    peer_ids: tuple[str, ...],
    link_only: bool,
    private_keys: dict[str, str],
    as_user: str,
    admin: bool,
) -> None:
    """Send configuration mails for PEER_IDS to the users owning them."""
    from wgmail.domain.access import ContextUserInfo, user_context
    from wgmail.domain.types import PeerIdentifier, UserIdentifier

    service = app.mail_service
    with user_context(ContextUserInfo(identifier=UserIdentifier(as_user), is_admin=admin)):
        result = service.send_peer_email(
            *(PeerIdentifier(p) for p in peer_ids),
            link_only=link_only,
            key_overrides=private_keys,
        )
    app.emit(result)
