"""Domain entities for taxonomy mapping.

Entities are the vocabulary shared by the matching core, the mapping store
and the persistence adapters.
"""

from .auto_mapping_config import AutoMappingConfig, SimilarityMetric
from .mapping import (
    LearnedCorrection,
    MappingSuggestion,
    MatchResult,
    StandardizedMapping,
    SuggestionRun,
)
from .terms import SourceTerm, TermKey, TermKind, UnmappedTerm

__all__ = [
    "AutoMappingConfig",
    "LearnedCorrection",
    "MappingSuggestion",
    "MatchResult",
    "SimilarityMetric",
    "SourceTerm",
    "StandardizedMapping",
    "SuggestionRun",
    "TermKey",
    "TermKind",
    "UnmappedTerm",
]
