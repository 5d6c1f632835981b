"""Domain layer: entities, errors and pure mapping services."""

__all__ = []
