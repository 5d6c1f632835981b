"""Domain services for taxonomy mapping.

The services here are pure business logic: they hold no I/O and receive
every collaborator (synonym tables, learned corrections, clocks) as explicit
arguments.
"""

from .correction_application import (
    CorrectionApplicationResult,
    apply_learned_corrections,
)
from .mapping_queries import (
    MappingStats,
    calculate_mapping_stats,
    filter_learned_corrections,
    filter_mappings,
    filter_unmapped_terms,
    flexible_word_match,
    group_terms_by_source,
)
from .mapping_store import MappingStore, StoreSnapshot

__all__ = [
    "CorrectionApplicationResult",
    "MappingStats",
    "MappingStore",
    "StoreSnapshot",
    "apply_learned_corrections",
    "calculate_mapping_stats",
    "filter_learned_corrections",
    "filter_mappings",
    "filter_unmapped_terms",
    "flexible_word_match",
    "group_terms_by_source",
]
