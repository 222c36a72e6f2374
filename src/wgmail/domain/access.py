"""Caller identity and user access-rights validation.

The identity of whoever triggered a send lives in a context variable,
so it follows the call chain without being threaded through every
signature. Callers bind it with :func:`user_context`.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from wgmail.domain.errors import AccessDeniedError
from wgmail.domain.types import UserIdentifier


@dataclass(frozen=True)
class ContextUserInfo:
    """The authenticated caller."""

    identifier: UserIdentifier
    is_admin: bool = False


_context_user: ContextVar[ContextUserInfo | None] = ContextVar("_context_user", default=None)

AccessCheck = Callable[[UserIdentifier], None]


@contextmanager
def user_context(info: ContextUserInfo) -> Generator[ContextUserInfo]:
    """Bind *info* as the calling user for the duration of the block."""
    token = _context_user.set(info)
    try:
        yield info
    finally:
        _context_user.reset(token)


def get_context_user() -> ContextUserInfo | None:
    return _context_user.get()


def validate_user_access_rights(user_id: UserIdentifier) -> None:
    """Raise :class:`AccessDeniedError` unless the caller may act for *user_id*.

    Admins may act for anyone; other callers only for themselves.
    """
    info = get_context_user()
    if info is None:
        raise AccessDeniedError("insufficient permissions: no user in context")
    if info.is_admin:
        return
    if info.identifier != user_id:
        target = user_id or "unlinked peers"
        raise AccessDeniedError(
            f"insufficient permissions: {info.identifier} may not act for {target}"
        )
