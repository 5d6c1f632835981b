from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities.mapping import StandardizedMapping
    from ..entities.terms import SourceTerm

_NON_ALNUM = re.compile("[^a-z0-9]+")


def normalize_term(text: str) -> str:
    return _NON_ALNUM.sub(" ", text.lower()).strip()


def flexible_word_match(text: str, search: str) -> bool:
    """True when every word of ``search`` occurs in ``text``, in any order."""
    words = normalize_term(search).split()
    if not words:
        return True
    haystack = normalize_term(text)
    return all(word in haystack for word in words)


def filter_unmapped_terms(
    terms: Iterable[SourceTerm],
    *,
    search: str = "",
    source_id: str | None = None,
    min_frequency: int | None = None,
) -> list[SourceTerm]:
    selected: list[SourceTerm] = []
    for term in terms:
        if search and not (
            flexible_word_match(term.text, search)
            or flexible_word_match(term.source_id, search)
        ):
            continue
        if source_id and term.source_id != source_id:
            continue
        if min_frequency and term.frequency < min_frequency:
            continue
        selected.append(term)
    return selected


def filter_mappings(
    mappings: Iterable[StandardizedMapping], search: str
) -> list[StandardizedMapping]:
    if not search:
        return list(mappings)
    return [
        mapping
        for mapping in mappings
        if flexible_word_match(mapping.standardized_name, search)
        or any(flexible_word_match(t.text, search) for t in mapping.source_terms)
    ]


def filter_learned_corrections(
    corrections: Mapping[str, str], search: str
) -> dict[str, str]:
    if not search:
        return dict(corrections)
    return {
        original: corrected
        for original, corrected in corrections.items()
        if flexible_word_match(original, search)
        or flexible_word_match(corrected, search)
    }


def group_terms_by_source(terms: Iterable[SourceTerm]) -> dict[str, list[SourceTerm]]:
    grouped: dict[str, list[SourceTerm]] = {}
    for term in terms:
        grouped.setdefault(term.source_id, []).append(term)
    return grouped


@dataclass(frozen=True, slots=True)
class MappingStats:
    total_mappings: int
    total_unmapped: int
    total_source_terms: int
    average_terms_per_mapping: float
    most_common_unmapped_source: str


def calculate_mapping_stats(
    mappings: Sequence[StandardizedMapping], unmapped: Sequence[SourceTerm]
) -> MappingStats:
    total_terms = sum(len(m.source_terms) for m in mappings)
    source_counts = Counter(term.source_id for term in unmapped)
    # Ties go to the source seen first.
    most_common = source_counts.most_common(1)[0][0] if source_counts else ""
    return MappingStats(
        total_mappings=len(mappings),
        total_unmapped=len(unmapped),
        total_source_terms=total_terms,
        average_terms_per_mapping=total_terms / len(mappings) if mappings else 0.0,
        most_common_unmapped_source=most_common,
    )
