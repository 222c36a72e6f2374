"""Shared pytest fixtures and collaborator fakes for wgmail tests."""

from __future__ import annotations

import io
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

import pytest
from click.testing import CliRunner

from wgmail.config.settings import WgMailSettings
from wgmail.domain.access import ContextUserInfo, user_context
from wgmail.domain.errors import MailSendError, NotFoundError
from wgmail.domain.mail import MailOptions
from wgmail.domain.types import (
    Peer,
    PeerIdentifier,
    PeerInterfaceConfig,
    User,
    UserIdentifier,
)
from wgmail.infrastructure.templates import MailTemplateRenderer, PeerConfigRenderer
from wgmail.services.mail import MailService

# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


@dataclass
class SentMail:
    subject: str
    body: str
    to: list[str]
    options: MailOptions


class RecordingMailer:
    """Mailer that records every send; optionally fails for given recipients."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.sent: list[SentMail] = []
        self._fail_for = fail_for or set()

    def send(self, subject: str, body: str, to: list[str], options: MailOptions) -> None:
        if self._fail_for.intersection(to):
            raise MailSendError("smtp connection refused")
        self.sent.append(SentMail(subject=subject, body=body, to=list(to), options=options))


class FakePeerRepository:
    def __init__(self, *peers: Peer) -> None:
        self._peers = {p.identifier: p for p in peers}
        self.lookups: list[str] = []

    def get_peer(self, peer_id: PeerIdentifier) -> Peer:
        self.lookups.append(peer_id)
        if peer_id not in self._peers:
            raise NotFoundError(f"peer {peer_id} not found")
        return self._peers[peer_id].model_copy(deep=True)


class FakeUserRepository:
    def __init__(self, *users: User) -> None:
        self._users = {u.identifier: u for u in users}

    def get_user(self, user_id: UserIdentifier) -> User:
        if user_id not in self._users:
            raise NotFoundError(f"user {user_id} not found")
        return self._users[user_id]


class RecordingConfigSource:
    """Wraps the real renderer and remembers the peers it was asked for."""

    def __init__(self) -> None:
        self._renderer = PeerConfigRenderer()
        self.requested: list[Peer] = []

    def get_peer_config(self, peer: Peer) -> TextIO:
        self.requested.append(peer)
        return self._renderer.get_peer_config(peer)


class BrokenConfigSource:
    def get_peer_config(self, peer: Peer) -> TextIO:
        raise OSError("config store unavailable")


class StaticConfigSource:
    def __init__(self, text: str) -> None:
        self._text = text

    def get_peer_config(self, peer: Peer) -> TextIO:
        return io.StringIO(self._text)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_peer(peer_id: str, user_id: str = "", **kwargs: object) -> Peer:
    interface = PeerInterfaceConfig(
        private_key=f"stored-key-{peer_id}",
        public_key=f"pub-{peer_id}",
        addresses=["10.0.0.2/32"],
        dns=["10.0.0.1"],
    )
    return Peer(
        identifier=PeerIdentifier(peer_id),
        user_identifier=UserIdentifier(user_id),
        interface_identifier="wg0",
        endpoint="vpn.example.com:51820",
        endpoint_public_key="server-pub",
        allowed_ips=["0.0.0.0/0"],
        interface=interface,
        **kwargs,
    )


def make_user(user_id: str, email: str = "", **kwargs: object) -> User:
    return User(identifier=UserIdentifier(user_id), email=email, **kwargs)


def allow_all(_user_id: UserIdentifier) -> None:
    """Access check that permits everything."""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> WgMailSettings:
    """Default settings rooted at an empty temp directory."""
    monkeypatch.delenv("WGMAIL_CONFIG", raising=False)
    return WgMailSettings.from_cli(base_dir=tmp_path)


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def admin_context() -> Generator[ContextUserInfo]:
    """Run the test as an admin caller."""
    with user_context(ContextUserInfo(identifier=UserIdentifier("admin"), is_admin=True)) as info:
        yield info


def build_service(
    settings: WgMailSettings,
    *,
    peers: list[Peer],
    users: list[User],
    mailer: RecordingMailer | None = None,
    config_files: Any = None,
    templates: Any = None,
    access_check: Any = allow_all,
) -> MailService:
    """Wire a MailService from fakes; missing collaborators get defaults."""
    return MailService(
        settings,
        mailer=mailer or RecordingMailer(),
        config_files=config_files or RecordingConfigSource(),
        users=FakeUserRepository(*users),
        peers=FakePeerRepository(*peers),
        templates=templates or MailTemplateRenderer("https://vpn.example.com"),
        access_check=access_check,
    )


INVENTORY_TOML = """\
[[users]]
identifier = "alice"
email = "alice@example.com"
firstname = "Alice"
lastname = "Liddell"

[[users]]
identifier = "bob"

[[peers]]
identifier = "peer-alice"
display_name = "Alice Laptop"
user_identifier = "alice"
endpoint = "vpn.example.com:51820"
endpoint_public_key = "server-pub"
allowed_ips = ["0.0.0.0/0"]

[peers.interface]
private_key = "alice-private"
addresses = ["10.0.0.2/32"]

[[peers]]
identifier = "peer-bob"
user_identifier = "bob"

[[peers]]
identifier = "peer-orphan"
"""


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """CWD with a wgmail.toml and inventory, isolated from the real environment."""
    monkeypatch.delenv("WGMAIL_CONFIG", raising=False)
    (tmp_path / "wgmail.toml").write_text(
        '[mail]\nsender = "portal@example.com"\n[web]\nexternal_url = "https://vpn.example.com"\n'
    )
    (tmp_path / "inventory.toml").write_text(INVENTORY_TOML)
    monkeypatch.chdir(tmp_path)
    return tmp_path
