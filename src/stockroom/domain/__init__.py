"""Domain layer — entities, value objects, errors, and the repository contract.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, or config.
"""
