from collections.abc import Sequence

from ...domain.entities.mapping import LearnedCorrection, StandardizedMapping


class InMemoryMappingRepository:
    """Repository kept in process memory; saves replace the held copies."""

    def __init__(
        self,
        mappings: Sequence[StandardizedMapping] = (),
        corrections: Sequence[LearnedCorrection] = (),
    ) -> None:
        super().__init__()
        self._mappings: list[StandardizedMapping] = list(mappings)
        self._corrections: list[LearnedCorrection] = list(corrections)
        self.save_count = 0

    def load_mappings(self) -> list[StandardizedMapping]:
        return list(self._mappings)

    def save_mappings(self, mappings: Sequence[StandardizedMapping]) -> None:
        self._mappings = list(mappings)
        self.save_count += 1

    def load_learned_corrections(self) -> list[LearnedCorrection]:
        return list(self._corrections)

    def save_learned_corrections(
        self, corrections: Sequence[LearnedCorrection]
    ) -> None:
        self._corrections = list(corrections)
        self.save_count += 1
