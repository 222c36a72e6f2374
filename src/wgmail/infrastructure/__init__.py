"""Infrastructure layer - QR rendering, templates, inventory files, outbox.

Implementations of the collaborator contracts in :mod:`wgmail.domain.ports`.
This layer may import from domain, never from services, commands, or output.
"""
