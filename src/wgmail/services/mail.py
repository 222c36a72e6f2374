"""MailService - sends peer configurations to the peers' owners.

Pipeline per peer: resolve -> authorize -> resolve user -> override key -> build -> send

Peers are processed one after another. Peer lookup, authorization and
build/send failures stop the batch; peers without a linked user, with
an unknown user, or whose user has no mail address are skipped.
"""

from __future__ import annotations

import io
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING

from wgmail.domain.access import AccessCheck, validate_user_access_rights
from wgmail.domain.mail import CONFIG_CONTENT_TYPE, QR_CONTENT_TYPE, MailAttachment, MailOptions
from wgmail.infrastructure.qr import encode_config_qr
from wgmail.services.base import BaseService
from wgmail.services.outcome import PeerOutcome
from wgmail.services.result import ServiceError, ServiceResult
from wgmail.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from wgmail.config.settings import WgMailSettings
    from wgmail.domain.ports import (
        ConfigFileSource,
        Mailer,
        PeerRepository,
        TemplateRenderer,
        UserRepository,
    )
    from wgmail.domain.types import Peer, PeerIdentifier, User

SKIP_NO_USER = "no user linked"
SKIP_USER_LOOKUP = "unable to fetch user"
SKIP_NO_EMAIL = "user has no mail address"


class _StageFailed(Exception):
    def __init__(self, stage: str, message: str) -> None:
        super().__init__(message)
        self.stage = stage


@contextmanager
def _stage(name: str, failure: str) -> Generator[None]:
    """Trace one build/send step and tag any exception with *failure*."""
    with trace_span(name):
        try:
            yield
        except Exception as exc:
            raise _StageFailed(name, f"{failure}: {exc}") from exc


class MailService(BaseService):
    """Builds and dispatches configuration mails for batches of peers."""

    def __init__(
        self,
        settings: WgMailSettings,
        *,
        mailer: Mailer,
        config_files: ConfigFileSource,
        users: UserRepository,
        peers: PeerRepository,
        templates: TemplateRenderer,
        access_check: AccessCheck = validate_user_access_rights,
    ) -> None:
        super().__init__(settings)
        self._mailer = mailer
        self._config_files = config_files
        self._users = users
        self._peers = peers
        self._templates = templates
        self._access_check = access_check

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def send_peer_email(
        self,
        *peer_ids: PeerIdentifier,
        link_only: bool = False,
        key_overrides: Mapping[str, str] | None = None,
    ) -> ServiceResult:
        """Mail each peer's configuration (or a link to it) to its owner.

        Args:
            peer_ids: Peers to notify, processed in order.
            link_only: Send a link instead of the configuration file and QR code.
            key_overrides: Private keys by peer id, applied to the in-memory
                peer only. Never stored and never logged.

        The first fatal error ends the batch; peers after it are not
        processed and ``error.detail["sent"]`` lists the ones already mailed.
        """
        op = "send_peer_email"
        overrides = key_overrides or {}
        sent: list[str] = []
        skipped: list[dict[str, str]] = []
        warnings: list[str] = []

        for peer_id in peer_ids:
            with trace_span("peer", peer=str(peer_id)):
                outcome = self._resolve(peer_id, overrides)
                if outcome.is_proceed:
                    outcome = self._deliver(outcome, link_only=link_only)
                span = get_current_span()
                if span is not None:
                    span.annotate("outcome", str(outcome.kind))

            if outcome.is_fail:
                assert outcome.error is not None
                error = outcome.error.model_copy(
                    update={"detail": {**outcome.error.detail, "sent": list(sent)}}
                )
                return ServiceResult(
                    ok=False,
                    op=op,
                    data={"sent": sent, "skipped": skipped},
                    warnings=warnings,
                    error=error,
                )
            if outcome.is_skip:
                skipped.append({"peer": outcome.peer_id, "reason": outcome.reason or ""})
                warnings.append(f"Skipped peer {outcome.peer_id}: {outcome.reason}")
                continue
            sent.append(outcome.peer_id)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "link_only": link_only,
                "sent": sent,
                "skipped": skipped,
                "sent_count": len(sent),
                "skipped_count": len(skipped),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _resolve(self, peer_id: PeerIdentifier, overrides: Mapping[str, str]) -> PeerOutcome:
        """Look up peer and owner, authorize, and apply any key override."""
        pid = str(peer_id)
        try:
            peer = self._peers.get_peer(peer_id)
        except Exception as exc:
            return PeerOutcome.fail(
                pid,
                ServiceError(
                    code="PEER_LOOKUP_FAILED",
                    message=f"failed to fetch peer {pid}: {exc}",
                    detail={"peer": pid},
                ),
            )

        try:
            self._access_check(peer.user_identifier)
        except Exception as exc:
            return PeerOutcome.fail(
                pid,
                ServiceError(code="ACCESS_DENIED", message=str(exc), detail={"peer": pid}),
            )

        if not peer.user_identifier:
            self._log.debug("skipping peer email", peer=pid, reason=SKIP_NO_USER)
            return PeerOutcome.skip(pid, SKIP_NO_USER)

        try:
            user = self._users.get_user(peer.user_identifier)
        except Exception as exc:
            self._log.debug(
                "skipping peer email", peer=pid, reason=SKIP_USER_LOOKUP, error=str(exc)
            )
            return PeerOutcome.skip(pid, SKIP_USER_LOOKUP)

        if pid in overrides:
            peer = peer.with_private_key(overrides[pid])

        if not user.email:
            self._log.debug("skipping peer email", peer=pid, reason=SKIP_NO_EMAIL)
            return PeerOutcome.skip(pid, SKIP_NO_EMAIL)

        return PeerOutcome.proceed(pid, peer, user)

    def _deliver(self, resolved: PeerOutcome, *, link_only: bool) -> PeerOutcome:
        """Build the mail for a resolved peer and hand it to the transport."""
        peer, user = resolved.peer, resolved.user
        assert peer is not None and user is not None
        try:
            body, options = self._build_mail(peer, user, link_only=link_only)
            with _stage("send", "failed to send mail"):
                self._mailer.send(self._settings.mail.subject, body, [user.email], options)
        except _StageFailed as exc:
            return PeerOutcome.fail(
                resolved.peer_id,
                ServiceError(
                    code="SEND_FAILED",
                    message=f"failed to send peer email for {resolved.peer_id}: {exc}",
                    detail={"peer": resolved.peer_id, "stage": exc.stage},
                ),
            )
        self._log.debug("peer email sent", peer=resolved.peer_id, link_only=link_only)
        return resolved

    def _build_mail(self, peer: Peer, user: User, *, link_only: bool) -> tuple[str, MailOptions]:
        """Return the plain-text body and the options carrying HTML and attachments."""
        options = MailOptions()

        if link_only:
            with _stage("render_body", "failed to get mail body"):
                text, html = self._templates.get_config_mail(user, self._settings.mail.deep_link)
        else:
            pid = peer.identifier
            cfg_name = peer.config_file_name()
            qr_name = self._settings.mail.qr_filename

            with _stage("render_config", f"failed to get peer config for {pid}"):
                config_text = self._config_files.get_peer_config(peer).read()
            with _stage("encode_qr", f"failed to generate peer config QR code for {pid}"):
                qr_image = encode_config_qr(
                    config_text,
                    box_size=self._settings.qr.box_size,
                    border=self._settings.qr.border,
                )
            with _stage("render_body", "failed to get full mail body"):
                text, html = self._templates.get_config_mail_with_attachment(
                    user, cfg_name, qr_name
                )

            options.attachments.append(
                MailAttachment(
                    name=cfg_name,
                    content_type=CONFIG_CONTENT_TYPE,
                    data=io.BytesIO(config_text.encode("utf-8")),
                    embedded=False,
                )
            )
            options.attachments.append(
                MailAttachment(
                    name=qr_name,
                    content_type=QR_CONTENT_TYPE,
                    data=qr_image,
                    embedded=True,
                )
            )

        options.html_body = html
        return text, options
