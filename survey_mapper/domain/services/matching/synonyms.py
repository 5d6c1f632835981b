from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ...entities.terms import TermKind


@dataclass(frozen=True, slots=True)
class SynonymGroup:
    key: str
    alternates: frozenset[str]
    phrases: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "phrases", tuple(sorted({self.key, *self.alternates}))
        )

    def members(self) -> tuple[str, ...]:
        return (self.key, *sorted(self.alternates))

    def mentioned_in(self, text: str) -> bool:
        """True if lower-cased ``text`` contains the key or an alternate.

        Containment is plain substring search, so "neurosurgery" mentions
        "neuro" and short alternates such as "er" match inside words.
        """
        return any(phrase in text for phrase in self.phrases)


class SynonymTable:
    """Immutable lookup of synonym groups keyed by canonical name.

    Keys and alternates are stored lower-cased. Groups iterate in key order so
    scoring never depends on how the table was assembled.
    """

    __slots__ = ("_groups",)

    def __init__(self, groups: Mapping[str, Iterable[str]] | None = None) -> None:
        built: dict[str, SynonymGroup] = {}
        for key, alternates in sorted((groups or {}).items()):
            canonical = key.strip().lower()
            if not canonical:
                continue
            built[canonical] = SynonymGroup(
                key=canonical,
                alternates=frozenset(
                    alt.strip().lower() for alt in alternates if alt.strip()
                ),
            )
        self._groups = MappingProxyType(built)

    def __reduce__(self) -> tuple[type[SynonymTable], tuple[dict[str, list[str]]]]:
        return (SynonymTable, (self.to_dict(),))

    def __repr__(self) -> str:
        return f"SynonymTable({len(self)} groups)"

    def __iter__(self) -> Iterator[SynonymGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._groups

    def get(self, key: str) -> SynonymGroup | None:
        return self._groups.get(key.lower())

    def share_group(self, left: str, right: str) -> bool:
        left_lower = left.lower()
        right_lower = right.lower()
        return any(
            group.mentioned_in(left_lower) and group.mentioned_in(right_lower)
            for group in self
        )

    def merged(self, extra: Mapping[str, Iterable[str]]) -> SynonymTable:
        combined: dict[str, set[str]] = {
            group.key: set(group.alternates) for group in self
        }
        for key, alternates in extra.items():
            combined.setdefault(key.lower(), set()).update(
                alt.lower() for alt in alternates
            )
        return SynonymTable(combined)

    def to_dict(self) -> dict[str, list[str]]:
        return {group.key: sorted(group.alternates) for group in self}


SPECIALTY_SYNONYMS = SynonymTable(
    {
        "cardiology": ["heart", "cardiac", "cardiovascular"],
        "orthopedics": ["ortho", "orthopedic", "orthopaedic"],
        "pediatrics": ["peds", "pediatric", "children"],
        "critical care": ["intensivist", "critical care medicine", "icu"],
        "emergency medicine": ["emergency", "er", "ed"],
        "internal medicine": ["internist", "internal med"],
        "obstetrics": ["ob/gyn", "obgyn", "obstetrics and gynecology"],
        "anesthesiology": ["anesthesia", "anesthetist"],
        "family medicine": ["family practice", "family physician", "family med"],
        "neurology": ["neurological", "neuro"],
        "psychiatry": ["psychiatric", "mental health"],
        "radiology": ["radiologist", "imaging", "diagnostic radiology"],
        "surgery": ["surgeon", "surgical"],
    }
)

EMPTY_SYNONYMS = SynonymTable()


def synonyms_for(kind: TermKind) -> SynonymTable:
    if kind is TermKind.SPECIALTY:
        return SPECIALTY_SYNONYMS
    return EMPTY_SYNONYMS
