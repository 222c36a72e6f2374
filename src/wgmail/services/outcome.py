"""Per-peer outcome of a notification step.

Every stage of the send pipeline answers with exactly one of three
outcomes: carry on with this peer, skip it, or stop the whole batch.
The loop driver in :mod:`wgmail.services.mail` only dispatches on the
kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wgmail.domain.types import Peer, User
    from wgmail.services.result import ServiceError


class OutcomeKind(StrEnum):
    PROCEED = "proceed"
    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class PeerOutcome:
    """Tagged result; only the fields matching ``kind`` are populated."""

    kind: OutcomeKind
    peer_id: str = ""
    peer: Peer | None = None
    user: User | None = None
    reason: str | None = None
    error: ServiceError | None = None

    @classmethod
    def proceed(cls, peer_id: str, peer: Peer, user: User) -> PeerOutcome:
        return cls(kind=OutcomeKind.PROCEED, peer_id=peer_id, peer=peer, user=user)

    @classmethod
    def skip(cls, peer_id: str, reason: str) -> PeerOutcome:
        return cls(kind=OutcomeKind.SKIP, peer_id=peer_id, reason=reason)

    @classmethod
    def fail(cls, peer_id: str, error: ServiceError) -> PeerOutcome:
        return cls(kind=OutcomeKind.FAIL, peer_id=peer_id, error=error)

    @property
    def is_proceed(self) -> bool:
        return self.kind is OutcomeKind.PROCEED

    @property
    def is_skip(self) -> bool:
        return self.kind is OutcomeKind.SKIP

    @property
    def is_fail(self) -> bool:
        return self.kind is OutcomeKind.FAIL
