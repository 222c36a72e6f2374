"""Collaborator contracts consumed by the mail service.

Each contract is structural: any object with matching methods will do.
Lookup methods raise :class:`~wgmail.domain.errors.NotFoundError` when
no record exists; every other failure propagates as an exception.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TextIO, runtime_checkable

if TYPE_CHECKING:
    from wgmail.domain.mail import MailOptions
    from wgmail.domain.types import Peer, PeerIdentifier, User, UserIdentifier


@runtime_checkable
class Mailer(Protocol):
    """Mail transport. A single synchronous attempt; raises when the send fails."""

    def send(self, subject: str, body: str, to: list[str], options: MailOptions) -> None: ...


@runtime_checkable
class ConfigFileSource(Protocol):
    """Produces raw WireGuard configuration text for a peer."""

    def get_peer_config(self, peer: Peer) -> TextIO: ...


@runtime_checkable
class UserRepository(Protocol):
    def get_user(self, user_id: UserIdentifier) -> User: ...


@runtime_checkable
class PeerRepository(Protocol):
    def get_peer(self, peer_id: PeerIdentifier) -> Peer: ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Renders ``(text, html)`` mail bodies."""

    def get_config_mail(self, user: User, link: str) -> tuple[str, str]: ...

    def get_config_mail_with_attachment(
        self, user: User, cfg_name: str, qr_name: str
    ) -> tuple[str, str]: ...
