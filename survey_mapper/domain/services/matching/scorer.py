"""Confidence scoring between a raw term and a standardized mapping.

Scores are the maximum of every rule that applies:

* case-insensitive exact equality scores 1.0
* a shared synonym group scores 0.9 (when synonyms are enabled)
* the configured string-similarity metric (when fuzzy matching is enabled)

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from rapidfuzz import fuzz

from ....constants import Confidence
from ...entities.auto_mapping_config import SimilarityMetric
from .synonyms import SPECIALTY_SYNONYMS

if TYPE_CHECKING:
    from ...entities.auto_mapping_config import AutoMappingConfig
    from ...entities.mapping import StandardizedMapping
    from .synonyms import SynonymTable

BIGRAM = 2


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + BIGRAM] for i in range(len(text) - BIGRAM + 1))


def dice_coefficient(left: str, right: str) -> float:
    """Sørensen-Dice coefficient over character bigrams (multiset overlap).

    Returns 1.0 for identical strings and 0.0 when either string is too short
    to yield a bigram.
    """
    if left == right:
        return 1.0
    if len(left) < BIGRAM or len(right) < BIGRAM:
        return 0.0
    overlap = sum((_bigrams(left) & _bigrams(right)).values())
    return 2.0 * overlap / (len(left) + len(right) - 2 * (BIGRAM - 1))


def similarity(left: str, right: str, metric: SimilarityMetric) -> float:
    match metric:
        case SimilarityMetric.DICE:
            value = dice_coefficient(left, right)
        case SimilarityMetric.INDEL:
            value = fuzz.ratio(left, right) / 100
        case SimilarityMetric.TOKEN_SET:
            value = fuzz.token_set_ratio(left, right) / 100
    return min(1.0, max(0.0, value))


def score(
    term: str,
    mapping: StandardizedMapping | str,
    config: AutoMappingConfig,
    synonyms: SynonymTable = SPECIALTY_SYNONYMS,
) -> float:
    name = mapping if isinstance(mapping, str) else mapping.standardized_name
    term_lower = term.strip().lower()
    name_lower = name.strip().lower()

    if term_lower == name_lower:
        return Confidence.EXACT

    best = Confidence.NONE
    if config.use_synonyms and synonyms.share_group(term_lower, name_lower):
        best = max(best, Confidence.SYNONYM)
    if config.use_fuzzy_matching:
        best = max(
            best, similarity(term_lower, name_lower, config.similarity_metric)
        )
    return best
