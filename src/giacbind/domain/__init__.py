"""Domain layer — error taxonomy, handles, serialization, and the command registry.

This layer depends only on stdlib and pydantic.
It must never import from engine, services, infrastructure, commands, or config.
"""
