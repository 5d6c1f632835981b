"""In-memory owner of standardized mappings and learned corrections.

The store keeps the mapping set a partition: every ``(text, source_id)`` key
belongs to at most one mapping. Every mutation validates first and then
commits, so a rejected call leaves the store untouched. ``version`` increases
on every successful change and can key any cache derived from the store.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..entities.mapping import (
    LearnedCorrection,
    StandardizedMapping,
    new_mapping_id,
    utcnow,
)
from ..exceptions import (
    DuplicateMemberAssignmentError,
    InvalidMappingError,
    MappingNotFoundError,
)

if TYPE_CHECKING:
    from ..entities.terms import SourceTerm, TermKey


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    mappings: tuple[StandardizedMapping, ...]
    corrections: tuple[LearnedCorrection, ...]
    version: int


@dataclass(slots=True)
class _StoreState:
    mappings: dict[str, StandardizedMapping] = field(default_factory=dict)
    owners: dict[TermKey, str] = field(default_factory=dict)
    corrections: dict[str, LearnedCorrection] = field(default_factory=dict)


def _build_state(
    mappings: Iterable[StandardizedMapping],
    corrections: Iterable[LearnedCorrection],
) -> _StoreState:
    state = _StoreState()
    conflicts: dict[TermKey, str | None] = {}
    for mapping in mappings:
        if mapping.id in state.mappings:
            raise InvalidMappingError(f"Duplicate mapping id: {mapping.id}")
        for key in mapping.member_keys():
            if key in state.owners:
                conflicts[key] = state.owners[key]
            state.owners.setdefault(key, mapping.id)
        state.mappings[mapping.id] = mapping
    if conflicts:
        raise DuplicateMemberAssignmentError(conflicts)
    for correction in corrections:
        state.corrections[correction.original_text] = correction
    return state


class MappingStore:
    """Mappings and learned corrections held as one partition of term keys.

    Reads return immutable values. Writes either commit completely or raise
    and leave the store as it was.
    """

    def __init__(
        self,
        mappings: Iterable[StandardizedMapping] = (),
        corrections: Iterable[LearnedCorrection] = (),
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__()
        self._clock = clock
        self._state = _build_state(mappings, corrections)
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    @property
    def mappings(self) -> tuple[StandardizedMapping, ...]:
        return tuple(self._state.mappings.values())

    @property
    def learned_corrections(self) -> MappingProxyType[str, str]:
        return MappingProxyType(
            {
                original: correction.corrected_name
                for original, correction in self._state.corrections.items()
            }
        )

    def learned_correction_records(self) -> tuple[LearnedCorrection, ...]:
        return tuple(self._state.corrections.values())

    def __len__(self) -> int:
        return len(self._state.mappings)

    def get_mapping(self, mapping_id: str) -> StandardizedMapping:
        try:
            return self._state.mappings[mapping_id]
        except KeyError:
            raise MappingNotFoundError(mapping_id) from None

    def find_by_name(self, name: str) -> StandardizedMapping | None:
        wanted = name.strip().lower()
        for mapping in self._state.mappings.values():
            if mapping.standardized_name.lower() == wanted:
                return mapping
        return None

    def mapping_for_term(self, key: TermKey) -> StandardizedMapping | None:
        owner = self._state.owners.get(key)
        return self._state.mappings.get(owner) if owner else None

    def is_mapped(self, key: TermKey) -> bool:
        return key in self._state.owners

    def create_mapping(
        self,
        name: str,
        members: Iterable[SourceTerm] = (),
        *,
        mapping_id: str | None = None,
    ) -> StandardizedMapping:
        """Create a mapping; fails if any member already belongs to a mapping.

        Reassigning a term means removing it from its current mapping first.
        """
        members = list(members)
        mapping_id = mapping_id or new_mapping_id()
        if mapping_id in self._state.mappings:
            raise InvalidMappingError(f"Duplicate mapping id: {mapping_id}")
        self._check_unassigned(members)
        now = self._clock()
        try:
            mapping = StandardizedMapping(
                id=mapping_id,
                standardized_name=name,
                source_terms=tuple(members),
                created_at=now,
                updated_at=now,
            )
        except ValueError as exc:
            raise InvalidMappingError(str(exc)) from exc
        self._state.mappings[mapping.id] = mapping
        for key in mapping.member_keys():
            self._state.owners[key] = mapping.id
        self._version += 1
        return mapping

    def add_members(
        self, mapping_id: str, members: Iterable[SourceTerm]
    ) -> StandardizedMapping:
        mapping = self.get_mapping(mapping_id)
        members = list(members)
        self._check_unassigned(members)
        updated = mapping.with_members(
            [*mapping.source_terms, *members], now=self._clock()
        )
        self._state.mappings[mapping_id] = updated
        for term in members:
            self._state.owners[term.key] = mapping_id
        self._version += 1
        return updated

    def remove_members(
        self, mapping_id: str, keys: Iterable[TermKey]
    ) -> StandardizedMapping:
        mapping = self.get_mapping(mapping_id)
        drop = set(keys)
        updated = mapping.with_members(
            [term for term in mapping.source_terms if term.key not in drop],
            now=self._clock(),
        )
        self._state.mappings[mapping_id] = updated
        for key in drop:
            if self._state.owners.get(key) == mapping_id:
                del self._state.owners[key]
        self._version += 1
        return updated

    def delete_mapping(self, mapping_id: str) -> StandardizedMapping:
        """Remove a mapping; its members go back to the unmapped pool.

        No learned correction is recorded here.
        """
        mapping = self.get_mapping(mapping_id)
        del self._state.mappings[mapping_id]
        for key in mapping.member_keys():
            self._state.owners.pop(key, None)
        self._version += 1
        return mapping

    def record_learned_correction(
        self, original_text: str, corrected_name: str
    ) -> LearnedCorrection:
        if not original_text:
            raise InvalidMappingError("original_text must not be empty")
        if not corrected_name.strip():
            raise InvalidMappingError("corrected_name must not be blank")
        correction = LearnedCorrection(
            original_text=original_text,
            corrected_name=corrected_name.strip(),
            created_at=self._clock(),
        )
        self._state.corrections[original_text] = correction
        self._version += 1
        return correction

    def remove_learned_correction(self, original_text: str) -> bool:
        if self._state.corrections.pop(original_text, None) is None:
            return False
        self._version += 1
        return True

    def clear_all(self) -> None:
        # Single reference swap: readers see either the old or the empty state.
        self._state = _StoreState()
        self._version += 1

    def unmapped_terms(self, all_observed: Iterable[SourceTerm]) -> list[SourceTerm]:
        """Observed terms that no mapping owns, in input order, without repeats."""
        owners = self._state.owners
        seen: set[TermKey] = set()
        unmapped: list[SourceTerm] = []
        for term in all_observed:
            if term.key in owners or term.key in seen:
                continue
            seen.add(term.key)
            unmapped.append(term)
        return unmapped

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            mappings=self.mappings,
            corrections=self.learned_correction_records(),
            version=self._version,
        )

    def restore(self, snapshot: StoreSnapshot) -> None:
        self._state = _build_state(snapshot.mappings, snapshot.corrections)
        self._version += 1

    def load(
        self,
        mappings: Iterable[StandardizedMapping],
        corrections: Iterable[LearnedCorrection],
    ) -> None:
        self._state = _build_state(mappings, corrections)
        self._version += 1

    def _check_unassigned(self, members: list[SourceTerm]) -> None:
        conflicts: dict[TermKey, str | None] = {}
        seen: set[TermKey] = set()
        for term in members:
            if term.key in self._state.owners:
                conflicts[term.key] = self._state.owners[term.key]
            elif term.key in seen:
                conflicts[term.key] = None
            seen.add(term.key)
        if conflicts:
            raise DuplicateMemberAssignmentError(conflicts)
