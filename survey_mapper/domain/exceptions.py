from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class SurveyMapperError(Exception):
    pass


class InvalidConfigError(SurveyMapperError, ValueError):
    pass


class InvalidMappingError(SurveyMapperError, ValueError):
    pass


class MappingNotFoundError(SurveyMapperError, KeyError):
    def __init__(self, mapping_id: str) -> None:
        super().__init__(mapping_id)
        self.mapping_id = mapping_id

    def __str__(self) -> str:
        return f"Mapping not found: {self.mapping_id}"


class DuplicateMemberAssignmentError(SurveyMapperError):
    """Raised when a term is already a member of another mapping.

    ``conflicts`` maps each offending ``(text, source_id)`` key to the id of
    the mapping that currently owns it (``None`` when the term was listed
    twice in the same request).
    """

    def __init__(self, conflicts: dict[tuple[str, str], str | None]) -> None:
        self.conflicts = dict(conflicts)
        labels = ", ".join(f"{text!r} ({source})" for text, source in self.conflicts)
        super().__init__(f"Terms already mapped: {labels}")


class WorkerError(SurveyMapperError):
    pass


class WorkerUnavailableError(WorkerError):
    pass


class WorkerCrashedError(WorkerError):
    pass


class PersistenceError(SurveyMapperError):
    pass


class MappingStage(StrEnum):
    SCORING = "scoring"
    PERSISTENCE = "persistence"


class AutoMappingError(SurveyMapperError):
    """A failed auto-map run.

    ``stage`` tells the caller where the run stopped. ``created_mapping_ids``
    lists mappings that were committed (and saved) before the failure; it is
    always empty for scoring failures.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: MappingStage,
        request_id: int | None = None,
        created_mapping_ids: Iterable[str] = (),
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.request_id = request_id
        self.created_mapping_ids = tuple(created_mapping_ids)

    @property
    def nothing_created(self) -> bool:
        return not self.created_mapping_ids
