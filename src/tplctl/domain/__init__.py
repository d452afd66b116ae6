"""Domain layer — types, rules, and manifest layering.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
