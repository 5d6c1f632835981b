from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from ....constants import Confidence
from ...entities.mapping import MatchResult
from .scorer import score
from .synonyms import SPECIALTY_SYNONYMS

if TYPE_CHECKING:
    from ...entities.auto_mapping_config import AutoMappingConfig
    from ...entities.mapping import StandardizedMapping
    from ...entities.terms import SourceTerm
    from .synonyms import SynonymTable


def _term_text(term: SourceTerm | str) -> str:
    return term if isinstance(term, str) else term.text


def best_match(
    term: SourceTerm | str,
    mappings: Sequence[StandardizedMapping],
    config: AutoMappingConfig,
    *,
    learned_corrections: Mapping[str, str] | None = None,
    synonyms: SynonymTable = SPECIALTY_SYNONYMS,
) -> MatchResult | None:
    """Find the standardized mapping a raw term most likely belongs to.

    Args:
        term: The raw term (or its text)
        mappings: Candidate standardized mappings
        config: Matching options; the threshold is inclusive
        learned_corrections: ``original text -> standardized name`` overrides;
            an exact, case-sensitive hit wins with confidence 1.0 and skips
            scoring entirely
        synonyms: Synonym table consulted by the scorer

    Returns:
        The best match, or None if nothing reaches the threshold. Equal
        confidences resolve to the lexicographically smallest name.
    """
    text = _term_text(term)
    if learned_corrections and text in learned_corrections:
        return MatchResult(
            standardized_name=learned_corrections[text],
            confidence=Confidence.LEARNED,
            learned=True,
        )

    if not config.use_existing_mappings:
        return None

    best: MatchResult | None = None
    for mapping in mappings:
        confidence = score(text, mapping, config, synonyms)
        name = mapping.standardized_name
        if (
            best is None
            or confidence > best.confidence
            or (confidence == best.confidence and name < best.standardized_name)
        ):
            best = MatchResult(standardized_name=name, confidence=confidence)

    if best is None or best.confidence < config.confidence_threshold:
        return None
    return best
