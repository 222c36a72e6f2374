"""Tests for peer and user entities."""

from __future__ import annotations

import pytest

from tests.conftest import make_peer
from wgmail.domain.types import Peer, PeerIdentifier, User, UserIdentifier


class TestConfigFileName:
    @pytest.mark.parametrize(
        ("display_name", "expected"),
        [
            ("Laptop", "Laptop.conf"),
            ("My Laptop", "My_Laptop.conf"),
            ("Alice's Phone (work)", "Alices_Phone_wor.conf"),
            ("a-b_c", "a-b_c.conf"),
            ("Überlaptop", "berlaptop.conf"),
        ],
    )
    def test_from_display_name(self, display_name: str, expected: str) -> None:
        peer = Peer(identifier=PeerIdentifier("x"), display_name=display_name)
        assert peer.config_file_name() == expected

    def test_truncated_to_sixteen_characters(self) -> None:
        peer = Peer(identifier=PeerIdentifier("x"), display_name="a" * 40)
        assert peer.config_file_name() == "a" * 16 + ".conf"

    def test_falls_back_to_identifier(self) -> None:
        peer = Peer(identifier=PeerIdentifier("AbCdEf0123456789="))
        assert peer.config_file_name() == "wg_AbCdEf01.conf"

    def test_identifier_fallback_is_sanitized(self) -> None:
        peer = Peer(identifier=PeerIdentifier("ab+/cd=="))
        assert peer.config_file_name() == "wg_abcd.conf"


class TestWithPrivateKey:
    def test_returns_copy_with_new_key(self) -> None:
        peer = make_peer("p1", "alice")
        copy = peer.with_private_key("override")
        assert copy.interface.private_key == "override"
        assert peer.interface.private_key == "stored-key-p1"

    def test_other_fields_preserved(self) -> None:
        peer = make_peer("p1", "alice", display_name="Phone")
        copy = peer.with_private_key("override")
        assert copy.identifier == peer.identifier
        assert copy.display_name == "Phone"
        assert copy.interface.addresses == peer.interface.addresses

    def test_copy_does_not_share_lists(self) -> None:
        peer = make_peer("p1", "alice")
        copy = peer.with_private_key("override")
        copy.interface.addresses.append("10.9.9.9/32")
        copy.allowed_ips.append("::/0")
        assert peer.interface.addresses == ["10.0.0.2/32"]
        assert peer.allowed_ips == ["0.0.0.0/0"]


class TestUser:
    def test_display_name_uses_full_name(self) -> None:
        user = User(identifier=UserIdentifier("u1"), firstname="Ada", lastname="Lovelace")
        assert user.display_name() == "Ada Lovelace"

    def test_display_name_falls_back_to_identifier(self) -> None:
        assert User(identifier=UserIdentifier("u1")).display_name() == "u1"

    def test_email_defaults_to_empty(self) -> None:
        assert User(identifier=UserIdentifier("u1")).email == ""
