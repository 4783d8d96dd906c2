"""Service layer — use cases returning ServiceResult.

Services may import from the domain layer.
They must never import from infrastructure or config.
"""
