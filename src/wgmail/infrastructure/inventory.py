"""TOML-backed peer and user repositories.

An inventory file holds ``[[users]]`` and ``[[peers]]`` tables whose
keys mirror the :class:`User` and :class:`Peer` fields::

    [[users]]
    identifier = "alice"
    email = "alice@example.com"

    [[peers]]
    identifier = "peer-1"
    display_name = "Alice Laptop"
    user_identifier = "alice"

    [peers.interface]
    addresses = ["10.0.0.2/32"]
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from wgmail.domain.errors import NotFoundError, WgMailError
from wgmail.domain.types import Peer, PeerIdentifier, User, UserIdentifier


class InventoryData(BaseModel):
    """Parsed contents of an inventory file."""

    users: list[User] = Field(default_factory=list)
    peers: list[Peer] = Field(default_factory=list)


class Inventory:
    """In-memory peer and user lookup, loaded once from TOML.

    Satisfies both :class:`PeerRepository` and :class:`UserRepository`.
    Lookups hand out copies so callers can never alter the loaded data.
    """

    def __init__(self, data: InventoryData) -> None:
        self._users = {u.identifier: u for u in data.users}
        self._peers = {p.identifier: p for p in data.peers}

    @classmethod
    def load(cls, path: Path) -> Inventory:
        """Read and validate an inventory file.

        Raises:
            WgMailError: The file is missing, not valid TOML, or does not
                match the inventory schema.
        """
        try:
            raw = path.read_text(encoding="utf-8")
            data = InventoryData.model_validate(tomllib.loads(raw))
        except (OSError, tomllib.TOMLDecodeError, ValidationError) as exc:
            raise WgMailError(f"invalid inventory {path}: {exc}") from exc
        return cls(data)

    def get_peer(self, peer_id: PeerIdentifier) -> Peer:
        peer = self._peers.get(peer_id)
        if peer is None:
            raise NotFoundError(f"peer {peer_id} not found")
        return peer.model_copy(deep=True)

    def get_user(self, user_id: UserIdentifier) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user.model_copy(deep=True)
