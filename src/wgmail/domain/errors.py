"""Exception hierarchy raised by collaborators of the mail service.

The service layer converts these into :class:`ServiceError` payloads;
nothing outside a collaborator should need to raise them.
"""

from __future__ import annotations


class WgMailError(Exception):
    """Base class for all wgmail errors."""


class NotFoundError(WgMailError):
    """A peer, user, or interface lookup found no record."""


class AccessDeniedError(WgMailError):
    """The calling user may not act on the requested user's peers."""


class QrEncodingError(WgMailError):
    """A configuration could not be rendered as a QR image."""


class TemplateRenderError(WgMailError):
    """A mail body or configuration template failed to render."""


class MailSendError(WgMailError):
    """The mail transport rejected or failed to store a message."""
