from __future__ import annotations

from collections.abc import Sequence
import os
from pathlib import Path
import tempfile

from pydantic import BaseModel, ValidationError

from ...domain.entities.mapping import LearnedCorrection, StandardizedMapping
from ...domain.exceptions import PersistenceError

DOCUMENT_VERSION = 1


class MappingStoreLoadError(PersistenceError):
    pass


class MappingStoreSaveError(PersistenceError):
    pass


class MappingDocument(BaseModel):
    version: int = DOCUMENT_VERSION
    mappings: list[StandardizedMapping] = []
    learned_corrections: list[LearnedCorrection] = []


class JsonMappingRepository:
    """Mapping persistence in a single JSON document.

    A missing file reads as an empty store. Writes go to a temporary file in
    the same directory and replace the document in one step, so a failed
    save never leaves a half-written file behind.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)

    def load_mappings(self) -> list[StandardizedMapping]:
        return list(self._read().mappings)

    def save_mappings(self, mappings: Sequence[StandardizedMapping]) -> None:
        document = self._read()
        document.mappings = list(mappings)
        self._write(document)

    def load_learned_corrections(self) -> list[LearnedCorrection]:
        return list(self._read().learned_corrections)

    def save_learned_corrections(
        self, corrections: Sequence[LearnedCorrection]
    ) -> None:
        document = self._read()
        document.learned_corrections = list(corrections)
        self._write(document)

    def _read(self) -> MappingDocument:
        if not self.path.exists():
            return MappingDocument()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MappingStoreLoadError(
                f"Failed to read mapping store {self.path}: {exc}"
            ) from exc
        if not raw.strip():
            return MappingDocument()
        try:
            return MappingDocument.model_validate_json(raw)
        except ValidationError as exc:
            raise MappingStoreLoadError(
                f"Invalid mapping store {self.path}: {exc}"
            ) from exc

    def _write(self, document: MappingDocument) -> None:
        payload = document.model_dump_json(indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise MappingStoreSaveError(
                f"Failed to save mapping store {self.path}: {exc}"
            ) from exc
