"""wgmail - WireGuard peer configuration mail notifications."""

__version__ = "0.1.0"
