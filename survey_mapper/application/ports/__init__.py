"""Port interfaces for external dependencies.

This module defines abstract interfaces (protocols) that external
adapters must implement. This enables dependency injection and testing.
"""

from .repositories import MappingRepositoryPort
from .services import ExecutionHostPort, LoggerPort

__all__ = ["ExecutionHostPort", "LoggerPort", "MappingRepositoryPort"]
