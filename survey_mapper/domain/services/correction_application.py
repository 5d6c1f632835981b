from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import pandas as pd


def _empty_counts() -> dict[str, int]:
    return {}


@dataclass(slots=True)
class CorrectionApplicationResult:
    frame: pd.DataFrame
    rows_processed: int = 0
    corrections_applied: int = 0
    terms_updated: dict[str, int] = field(default_factory=_empty_counts)


def apply_learned_corrections(
    frame: pd.DataFrame,
    column: str,
    corrections: Mapping[str, str],
) -> CorrectionApplicationResult:
    """Rewrite ``column`` with learned corrections.

    Exact keys are tried first, then lower-cased keys. Values that already
    equal their correction are left alone and not counted. The input frame is
    not modified.
    """
    if column not in frame.columns:
        raise KeyError(f"Column not found: {column}")

    result = frame.copy()
    rows = len(result)
    if rows == 0 or not corrections:
        return CorrectionApplicationResult(frame=result, rows_processed=rows)

    lowered = {key.lower(): value for key, value in corrections.items()}

    def _correct(value: object) -> str | None:
        if not isinstance(value, str):
            return None
        target = corrections.get(value)
        if target is None:
            target = lowered.get(value.lower())
        if target is None or target == value:
            return None
        return target

    corrected = result[column].map(_correct)
    changed = corrected.notna()
    counts = result.loc[changed, column].value_counts(sort=False)

    result.loc[changed, column] = corrected[changed]
    return CorrectionApplicationResult(
        frame=result,
        rows_processed=rows,
        corrections_applied=int(changed.sum()),
        terms_updated={str(term): int(count) for term, count in counts.items()},
    )
