from dataclasses import dataclass
from enum import StrEnum

type TermKey = tuple[str, str]


class TermKind(StrEnum):
    SPECIALTY = "specialty"
    COLUMN = "column"
    REGION = "region"
    PRACTICE_SETTING = "practice-setting"


@dataclass(frozen=True, slots=True)
class SourceTerm:
    """A raw taxonomy term as it appeared in one survey upload.

    Terms are identified by ``(text, source_id)``; ``frequency`` and ``kind``
    are descriptive and do not take part in identity checks.
    """

    text: str
    source_id: str
    frequency: int = 1
    kind: TermKind = TermKind.SPECIALTY

    def __post_init__(self) -> None:
        if self.frequency < 0:
            raise ValueError(f"frequency must be non-negative, got {self.frequency}")

    @property
    def key(self) -> TermKey:
        return (self.text, self.source_id)


# Unmapped terms are plain source terms that no mapping currently owns.
type UnmappedTerm = SourceTerm
