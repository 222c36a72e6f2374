"""BaseService - shared foundation for wgmail services.

Every service receives the resolved :class:`WgMailSettings` at
construction time; collaborators are supplied by the concrete service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from wgmail.config.settings import WgMailSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class MailService(BaseService):
            def send_peer_email(self, *peer_ids: str) -> ServiceResult:
                subject = self._settings.mail.subject
                ...
    """

    def __init__(self, settings: WgMailSettings) -> None:
        self._settings = settings
        self._log = structlog.get_logger(type(self).__module__)
