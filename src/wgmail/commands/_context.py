"""AppContext - shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Wires the file-backed collaborators lazily and
centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wgmail.output.formatters import format_result

if TYPE_CHECKING:
    from wgmail.config.settings import WgMailSettings
    from wgmail.services.mail import MailService
    from wgmail.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The inventory is only read when a command asks for the mail
    service, so ``--help`` and ``--version`` never touch the filesystem.
    """

    def __init__(self, settings: WgMailSettings) -> None:
        self.settings = settings
        self._mail_service: MailService | None = None

        from wgmail.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from wgmail.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def mail_service(self) -> MailService:
        """The mail service wired to inventory, templates, and outbox."""
        if self._mail_service is None:
            from wgmail.domain.errors import WgMailError
            from wgmail.infrastructure.inventory import Inventory
            from wgmail.infrastructure.outbox import OutboxMailer
            from wgmail.infrastructure.templates import MailTemplateRenderer, PeerConfigRenderer
            from wgmail.services.mail import MailService

            settings = self.settings
            override_dir = settings.templates.override_dir
            if override_dir is not None:
                override_dir = settings.resolve_path(override_dir)

            try:
                inventory = Inventory.load(settings.resolve_path(settings.inventory.path))
            except WgMailError as exc:
                raise click.ClickException(str(exc)) from exc

            self._mail_service = MailService(
                settings,
                mailer=OutboxMailer(
                    settings.resolve_path(settings.outbox.directory), settings.mail.sender
                ),
                config_files=PeerConfigRenderer(override_dir=override_dir),
                users=inventory,
                peers=inventory,
                templates=MailTemplateRenderer(
                    settings.web.external_url, override_dir=override_dir
                ),
            )
        return self._mail_service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
