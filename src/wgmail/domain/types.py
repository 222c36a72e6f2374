"""Identifiers and entities read by the mail service.

Peers and users are loaded by repository collaborators and are never
persisted from here. Peer copies carrying an overridden private key
exist only for the duration of one send.
"""

from __future__ import annotations

import re
from typing import NewType

from pydantic import BaseModel, Field

PeerIdentifier = NewType("PeerIdentifier", str)
InterfaceIdentifier = NewType("InterfaceIdentifier", str)
UserIdentifier = NewType("UserIdentifier", str)

_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9\-_]+")


def _truncate(value: str, limit: int) -> str:
    return value[:limit]


class PeerInterfaceConfig(BaseModel):
    """Client-side ``[Interface]`` material of a peer."""

    private_key: str = ""
    public_key: str = ""
    addresses: list[str] = Field(default_factory=list)
    dns: list[str] = Field(default_factory=list)
    mtu: int | None = None


class Peer(BaseModel):
    """A VPN endpoint, optionally linked to a user."""

    identifier: PeerIdentifier
    display_name: str = ""
    user_identifier: UserIdentifier = UserIdentifier("")
    interface_identifier: InterfaceIdentifier = InterfaceIdentifier("")
    endpoint: str = ""
    endpoint_public_key: str = ""
    allowed_ips: list[str] = Field(default_factory=list)
    preshared_key: str = ""
    persistent_keepalive: int = 0
    interface: PeerInterfaceConfig = Field(default_factory=PeerInterfaceConfig)

    def config_file_name(self) -> str:
        """Filesystem-safe ``.conf`` name derived from the display name.

        Examples:
            >>> Peer(identifier="abc", display_name="My Laptop!").config_file_name()
            'My_Laptop.conf'
            >>> Peer(identifier="0123456789abcdef").config_file_name()
            'wg_01234567.conf'
        """
        if self.display_name:
            name = self.display_name.replace(" ", "_")
            name = _FILENAME_UNSAFE.sub("", name)
            return f"{_truncate(name, 16)}.conf"
        name = f"wg_{_truncate(str(self.identifier), 8)}"
        return f"{_FILENAME_UNSAFE.sub('', name)}.conf"

    def with_private_key(self, private_key: str) -> Peer:
        """Return a deep copy whose interface private key is *private_key*."""
        interface = self.interface.model_copy(update={"private_key": private_key}, deep=True)
        return self.model_copy(update={"interface": interface}, deep=True)


class User(BaseModel):
    """A portal user who may own peers."""

    identifier: UserIdentifier
    email: str = ""
    firstname: str = ""
    lastname: str = ""
    is_admin: bool = False

    def display_name(self) -> str:
        full = f"{self.firstname} {self.lastname}".strip()
        return full or str(self.identifier)
