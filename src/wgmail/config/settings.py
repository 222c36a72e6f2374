"""Unified settings - CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  - CLI flags passed by Click
  2. Env vars     - ``WGMAIL_*`` prefix, ``__`` for nested sections
  3. TOML file    - ``wgmail.toml`` discovered via walk-up
  4. Code defaults - baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from wgmail.config.discovery import find_config
from wgmail.config.models import (
    InventoryConfig,
    MailConfig,
    OutboxConfig,
    QrConfig,
    TemplatesConfig,
    WebConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``wgmail.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class WgMailSettings(BaseSettings):
    """Settings for the wgmail CLI and services, frozen after construction.

    Relative paths in the TOML sections are resolved against
    :attr:`base_dir` by :meth:`resolve_path`.

    Attributes:
        base_dir: Directory holding ``wgmail.toml`` (or CWD if none found).
        config_path: The TOML file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "WGMAIL_",
        "env_nested_delimiter": "__",
    }

    base_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    mail: MailConfig = Field(default_factory=MailConfig)
    qr: QrConfig = Field(default_factory=QrConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    outbox: OutboxConfig = Field(default_factory=OutboxConfig)
    inventory: InventoryConfig = Field(default_factory=InventoryConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        base_dir: Path | None = None,
        **cli_flags: Any,
    ) -> WgMailSettings:
        """Construct settings from a CLI invocation.

        Discovers ``wgmail.toml`` via walk-up (or explicit *config_path*)
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
            toml_path = p
        else:
            toml_path = find_config(base_dir)

        resolved = base_dir
        if resolved is None:
            resolved = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(base_dir=resolved, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def resolve_path(self, path: Path) -> Path:
        """Resolve a configured path relative to :attr:`base_dir`."""
        return path if path.is_absolute() else self.base_dir / path
