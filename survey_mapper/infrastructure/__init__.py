"""Infrastructure adapters: persistence, term input, logging and workers."""

from .container import DependencyContainer, create_default_container

__all__ = ["DependencyContainer", "create_default_container"]
