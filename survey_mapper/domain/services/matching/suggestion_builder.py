"""Batch matching of unmapped terms into mapping suggestions.

Each unmapped term is resolved with :func:`best_match`. Terms that resolve to
the same standardized name are grouped into one :class:`MappingSuggestion`.
Terms that resolve to nothing stay unmapped: the builder never invents a new
standardized name, even when several unmatched terms are identical.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING

from ....constants import Defaults
from ...entities.mapping import MappingSuggestion, SuggestionRun
from .matcher import best_match
from .synonyms import synonyms_for

if TYPE_CHECKING:
    from ...entities.auto_mapping_config import AutoMappingConfig
    from ...entities.mapping import StandardizedMapping
    from ...entities.terms import SourceTerm
    from .synonyms import SynonymTable

type ProgressCallback = Callable[[float], None]

COMPLETE = 100.0


class SuggestionBuilder:
    """Groups unmapped terms under the standardized names they match.

    Example:
        >>> builder = SuggestionBuilder(config)
        >>> run = builder.run(unmapped_terms, existing_mappings)
        >>> for suggestion in run.suggestions:
        ...     print(suggestion.standardized_name, suggestion.member_texts)
    """

    def __init__(
        self,
        config: AutoMappingConfig,
        *,
        learned_corrections: Mapping[str, str] | None = None,
        synonyms: SynonymTable | None = None,
        progress_every: int = Defaults.PROGRESS_EVERY,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Matching options for the whole batch
            learned_corrections: ``original text -> standardized name`` overrides
            synonyms: Synonym table for every term; when omitted the table is
                chosen per term kind
            progress_every: Report progress once every this many terms
        """
        if progress_every < 1:
            raise ValueError(f"progress_every must be positive, got {progress_every}")
        self.config = config
        self.learned_corrections: Mapping[str, str] = dict(learned_corrections or {})
        self.synonyms = synonyms
        self.progress_every = progress_every

    def run(
        self,
        unmapped_terms: Sequence[SourceTerm],
        existing_mappings: Sequence[StandardizedMapping],
        on_progress: ProgressCallback | None = None,
    ) -> SuggestionRun:
        """Match every term and group the hits.

        Args:
            unmapped_terms: Terms to resolve, in the order results should keep
            existing_mappings: Candidate standardized mappings
            on_progress: Called with a non-decreasing percentage; always called
                with 100 once the batch is done, including for empty input

        Returns:
            SuggestionRun with suggestions in first-hit order and the terms
            that matched nothing
        """
        by_name: dict[str, MappingSuggestion] = {}
        unmatched: list[SourceTerm] = []
        total = len(unmapped_terms)

        for index, term in enumerate(unmapped_terms):
            if on_progress is not None and index % self.progress_every == 0:
                on_progress(index / total * 100)

            match = best_match(
                term,
                existing_mappings,
                self.config,
                learned_corrections=self.learned_corrections,
                synonyms=(
                    self.synonyms
                    if self.synonyms is not None
                    else synonyms_for(term.kind)
                ),
            )
            if match is None:
                unmatched.append(term)
                continue

            suggestion = by_name.get(match.standardized_name)
            if suggestion is None:
                suggestion = MappingSuggestion(
                    standardized_name=match.standardized_name,
                    confidence=match.confidence,
                )
                by_name[match.standardized_name] = suggestion
            suggestion.members.append(term)

        if on_progress is not None:
            on_progress(COMPLETE)

        return SuggestionRun(suggestions=list(by_name.values()), unmatched=unmatched)


def build_suggestions(
    unmapped_terms: Sequence[SourceTerm],
    existing_mappings: Sequence[StandardizedMapping],
    config: AutoMappingConfig,
    on_progress: ProgressCallback | None = None,
    *,
    learned_corrections: Mapping[str, str] | None = None,
    synonyms: SynonymTable | None = None,
    progress_every: int = Defaults.PROGRESS_EVERY,
) -> list[MappingSuggestion]:
    builder = SuggestionBuilder(
        config,
        learned_corrections=learned_corrections,
        synonyms=synonyms,
        progress_every=progress_every,
    )
    return builder.run(unmapped_terms, existing_mappings, on_progress).suggestions
