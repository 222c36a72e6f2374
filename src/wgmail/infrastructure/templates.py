"""Jinja2 rendering of mail bodies and peer configuration files.

Templates ship inside the package under ``templates/<group>/``. An
optional override directory is consulted first, either namespaced
(``<override_dir>/mail/``) or flat (``<override_dir>/``).
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateError,
    select_autoescape,
)

from wgmail.domain.errors import TemplateRenderError

if TYPE_CHECKING:
    from wgmail.domain.types import Peer, User


def build_template_environment(group: str, *, override_dir: Path | None = None) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults."""
    loaders: list[BaseLoader] = []
    if override_dir is not None:
        loaders.append(FileSystemLoader([str(override_dir / group), str(override_dir)]))

    loaders.append(PackageLoader("wgmail", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
    )


class MailTemplateRenderer:
    """Renders ``(text, html)`` body pairs for configuration mails."""

    def __init__(self, portal_url: str, *, override_dir: Path | None = None) -> None:
        self._portal_url = portal_url
        self._env = build_template_environment("mail", override_dir=override_dir)

    def _render_pair(self, name: str, **context: Any) -> tuple[str, str]:
        try:
            text = self._env.get_template(f"{name}.txt").render(
                portal_url=self._portal_url, **context
            )
            html = self._env.get_template(f"{name}.html").render(
                portal_url=self._portal_url, **context
            )
        except TemplateError as exc:
            raise TemplateRenderError(f"failed to render {name}: {exc}") from exc
        return text, html

    def get_config_mail(self, user: User, link: str) -> tuple[str, str]:
        return self._render_pair("mail_with_link", user=user, link=link)

    def get_config_mail_with_attachment(
        self, user: User, cfg_name: str, qr_name: str
    ) -> tuple[str, str]:
        return self._render_pair(
            "mail_with_attachment",
            user=user,
            config_file_name=cfg_name,
            qr_file_name=qr_name,
        )


class PeerConfigRenderer:
    """Renders a client ``.conf`` file from the in-memory peer."""

    def __init__(self, *, override_dir: Path | None = None) -> None:
        self._env = build_template_environment("wireguard", override_dir=override_dir)

    def get_peer_config(self, peer: Peer) -> TextIO:
        try:
            rendered = self._env.get_template("wg_peer.conf").render(peer=peer)
        except TemplateError as exc:
            raise TemplateRenderError(
                f"failed to render config for {peer.identifier}: {exc}"
            ) from exc
        return io.StringIO(rendered)
