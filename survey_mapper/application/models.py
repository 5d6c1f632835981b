from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from ..constants import Defaults

if TYPE_CHECKING:
    from ..domain.entities.auto_mapping_config import AutoMappingConfig
    from ..domain.entities.mapping import MappingSuggestion, StandardizedMapping
    from ..domain.entities.terms import SourceTerm
    from ..domain.services.matching.synonyms import SynonymTable


class MessageType(StrEnum):
    PROGRESS = "progress"
    RESULT = "result"


def _empty_corrections() -> dict[str, str]:
    return {}


def _empty_ids() -> list[str]:
    return []


@dataclass(frozen=True, slots=True)
class AutoMapPayload:
    unmapped_terms: tuple[SourceTerm, ...]
    existing_mappings: tuple[StandardizedMapping, ...]
    learned_corrections: Mapping[str, str] = field(default_factory=_empty_corrections)
    synonyms: SynonymTable | None = None


@dataclass(frozen=True, slots=True)
class ConfidencePayload:
    term: str
    mapping: StandardizedMapping | str
    synonyms: SynonymTable | None = None


@dataclass(frozen=True, slots=True)
class WorkerRequest:
    """One immutable unit of work for the background worker."""

    action: str
    request_id: int
    payload: AutoMapPayload | ConfidencePayload
    config: AutoMappingConfig
    progress_every: int = Defaults.PROGRESS_EVERY


@dataclass(frozen=True, slots=True)
class ProgressMessage:
    request_id: int
    progress: float
    type: MessageType = MessageType.PROGRESS

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type.value,
            "requestId": self.request_id,
            "progress": self.progress,
        }


@dataclass(frozen=True, slots=True)
class WorkerResponse:
    request_id: int
    success: bool
    data: object = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def ok(cls, request_id: int, data: object) -> WorkerResponse:
        return cls(request_id=request_id, success=True, data=data)

    @classmethod
    def failure(
        cls, request_id: int, error: str, *, error_type: str | None = None
    ) -> WorkerResponse:
        return cls(
            request_id=request_id,
            success=False,
            error=error,
            error_type=error_type,
        )

    def to_dict(self) -> dict[str, object]:
        message: dict[str, object] = {
            "requestId": self.request_id,
            "success": self.success,
        }
        if self.success:
            message["data"] = self.data
        else:
            message["error"] = self.error
        return message


@dataclass(slots=True)
class AutoMapResult:
    request_id: int
    suggestions: list[MappingSuggestion]
    unmatched: list[SourceTerm]

    @property
    def suggestion_count(self) -> int:
        return len(self.suggestions)


@dataclass(slots=True)
class AcceptResult:
    created_mapping_ids: list[str] = field(default_factory=_empty_ids)
    extended_mapping_ids: list[str] = field(default_factory=_empty_ids)

    @property
    def changed_mapping_ids(self) -> list[str]:
        return [*self.created_mapping_ids, *self.extended_mapping_ids]


class ChangeReason(StrEnum):
    CREATED = "created"
    EXTENDED = "extended"
    DELETED = "deleted"
    REASSIGNED = "reassigned"
    CORRECTIONS = "corrections"
    CLEARED = "cleared"
    LOADED = "loaded"


@dataclass(frozen=True, slots=True)
class MappingsChangedEvent:
    reason: ChangeReason
    mapping_ids: tuple[str, ...]
    version: int
