"""Survey term mapping.

This package reconciles the free-text taxonomy terms that compensation-survey
vendors use (specialties, column headers, regions, practice settings) into
one standardized vocabulary.

Features:
- Confidence scoring by exact match, synonym groups and string similarity
- Suggestion building that never invents new standardized names
- A mapping store that keeps every term in at most one mapping
- Learned corrections that pin a raw term to a name for all later runs
- Background execution with ordered progress and stale-result discarding
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("survey-mapper")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Core exports
from survey_mapper.application.auto_mapping_use_case import AutoMappingUseCase
from survey_mapper.domain.entities import (
    AutoMappingConfig,
    LearnedCorrection,
    MappingSuggestion,
    SourceTerm,
    StandardizedMapping,
)
from survey_mapper.domain.services.mapping_store import MappingStore
from survey_mapper.domain.services.matching import best_match, build_suggestions, score

__all__ = [
    "__version__",
    # Entities
    "AutoMappingConfig",
    "LearnedCorrection",
    "MappingSuggestion",
    "SourceTerm",
    "StandardizedMapping",
    # Matching
    "best_match",
    "build_suggestions",
    "score",
    # Store and use case
    "AutoMappingUseCase",
    "MappingStore",
]
