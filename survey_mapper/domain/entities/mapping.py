from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .terms import SourceTerm, TermKey


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_mapping_id() -> str:
    return uuid4().hex


def unique_terms(terms: Iterable[SourceTerm]) -> tuple[SourceTerm, ...]:
    """Drop repeated ``(text, source_id)`` keys, keeping first occurrences."""
    seen: set[TermKey] = set()
    ordered: list[SourceTerm] = []
    for term in terms:
        if term.key in seen:
            continue
        seen.add(term.key)
        ordered.append(term)
    return tuple(ordered)


class StandardizedMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_mapping_id)
    standardized_name: str
    source_terms: tuple[SourceTerm, ...] = ()
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("standardized_name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("standardized_name must not be blank")
        return cleaned

    @field_validator("source_terms")
    @classmethod
    def _members_unique(
        cls, value: tuple[SourceTerm, ...]
    ) -> tuple[SourceTerm, ...]:
        return unique_terms(value)

    def member_keys(self) -> tuple[TermKey, ...]:
        return tuple(term.key for term in self.source_terms)

    def has_member(self, key: TermKey) -> bool:
        return any(term.key == key for term in self.source_terms)

    def with_members(
        self, members: Iterable[SourceTerm], *, now: datetime | None = None
    ) -> StandardizedMapping:
        return self.model_copy(
            update={
                "source_terms": unique_terms(members),
                "updated_at": now or utcnow(),
            }
        )


class LearnedCorrection(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_text: str
    corrected_name: str
    created_at: datetime = Field(default_factory=utcnow)


@dataclass(frozen=True, slots=True)
class MatchResult:
    standardized_name: str
    confidence: float
    learned: bool = False


@dataclass(slots=True)
class MappingSuggestion:
    standardized_name: str
    confidence: float
    members: list[SourceTerm] = field(default_factory=list)

    @property
    def member_texts(self) -> list[str]:
        return [term.text for term in self.members]


@dataclass(slots=True)
class SuggestionRun:
    suggestions: list[MappingSuggestion]
    unmatched: list[SourceTerm]

    @property
    def matched_count(self) -> int:
        return sum(len(s.members) for s in self.suggestions)
