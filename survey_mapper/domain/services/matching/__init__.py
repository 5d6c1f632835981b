"""Matching services for taxonomy terms.

This package holds the pure matching core: confidence scoring, synonym
lookup, per-term candidate matching and batch suggestion building.
"""

from .matcher import best_match
from .scorer import dice_coefficient, score, similarity
from .suggestion_builder import ProgressCallback, SuggestionBuilder, build_suggestions
from .synonyms import (
    EMPTY_SYNONYMS,
    SPECIALTY_SYNONYMS,
    SynonymGroup,
    SynonymTable,
    synonyms_for,
)

__all__ = [
    "EMPTY_SYNONYMS",
    "SPECIALTY_SYNONYMS",
    "ProgressCallback",
    "SuggestionBuilder",
    "SynonymGroup",
    "SynonymTable",
    "best_match",
    "build_suggestions",
    "dice_coefficient",
    "score",
    "similarity",
    "synonyms_for",
]
