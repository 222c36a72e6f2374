"""Domain layer - identifiers, entities, mail payloads, and access rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
