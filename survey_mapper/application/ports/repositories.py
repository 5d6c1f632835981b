from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...domain.entities.mapping import LearnedCorrection, StandardizedMapping


@runtime_checkable
class MappingRepositoryPort(Protocol):
    pass

    def load_mappings(self) -> list[StandardizedMapping]: ...

    def save_mappings(self, mappings: Sequence[StandardizedMapping]) -> None: ...

    def load_learned_corrections(self) -> list[LearnedCorrection]: ...

    def save_learned_corrections(
        self, corrections: Sequence[LearnedCorrection]
    ) -> None: ...
