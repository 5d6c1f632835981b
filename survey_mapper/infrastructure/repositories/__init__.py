"""Persistence adapters for mappings and learned corrections."""

from .json_mapping_repository import (
    JsonMappingRepository,
    MappingDocument,
    MappingStoreLoadError,
    MappingStoreSaveError,
)
from .memory_mapping_repository import InMemoryMappingRepository

__all__ = [
    "InMemoryMappingRepository",
    "JsonMappingRepository",
    "MappingDocument",
    "MappingStoreLoadError",
    "MappingStoreSaveError",
]
