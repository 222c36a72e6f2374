"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``wgmail.toml`` only holds
overrides. A fresh deployment usually needs just ``[web] external_url``
and ``[mail] sender``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class MailConfig(BaseModel):
    """[mail] section."""

    model_config = {"frozen": True}

    subject: str = "WireGuard VPN Configuration"
    sender: str = "wgportal@localhost"
    qr_filename: str = "WireGuardQRCode.png"
    deep_link: str = "deep link TBD"


class QrConfig(BaseModel):
    """[qr] section. Sizes are in QR modules; one module is ``box_size`` pixels."""

    model_config = {"frozen": True}

    box_size: int = Field(default=4, ge=1)
    border: int = Field(default=2, ge=0)


class WebConfig(BaseModel):
    """[web] section."""

    model_config = {"frozen": True}

    external_url: str = "http://localhost:8888"


class TemplatesConfig(BaseModel):
    """[templates] section."""

    model_config = {"frozen": True}

    override_dir: Path | None = None


class OutboxConfig(BaseModel):
    """[outbox] section."""

    model_config = {"frozen": True}

    directory: Path = Path("outbox")


class InventoryConfig(BaseModel):
    """[inventory] section."""

    model_config = {"frozen": True}

    path: Path = Path("inventory.toml")
