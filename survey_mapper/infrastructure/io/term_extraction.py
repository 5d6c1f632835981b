"""Turn parsed survey rows into source terms.

Parsing the vendor files themselves happens upstream; this adapter only sees
a DataFrame and counts how often each distinct value occurs in one column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from ...domain.entities.terms import SourceTerm, TermKind
from .exceptions import DataParseError, DataSourceNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

TERM_COLUMN = "term"
SOURCE_COLUMN = "source"
FREQUENCY_COLUMN = "frequency"
KIND_COLUMN = "kind"


def extract_source_terms(
    frame: pd.DataFrame,
    *,
    column: str,
    source_id: str,
    kind: TermKind = TermKind.SPECIALTY,
) -> list[SourceTerm]:
    """Distinct non-blank values of ``column`` with their occurrence counts.

    Values are stripped but keep their casing. Terms come back in order of
    first appearance.
    """
    if column not in frame.columns:
        raise DataParseError(f"Column not found: {column}")
    values = frame[column].dropna().astype(str).str.strip()
    values = values[values != ""]
    counts = values.value_counts(sort=False)
    return [
        SourceTerm(text=str(text), source_id=source_id, frequency=int(count), kind=kind)
        for text, count in counts.items()
    ]


@dataclass(slots=True)
class TermFileOptions:
    encoding: str = "utf-8"
    default_source: str = "default"
    default_kind: TermKind = TermKind.SPECIALTY


class TermFileReader:
    """Reads a term list from CSV.

    The file needs a ``term`` column; ``source``, ``frequency`` and ``kind``
    are optional. Repeated ``(term, source)`` rows are merged and their
    frequencies summed (a row without a frequency counts once).
    """

    def read(
        self,
        path: Path,
        options: TermFileOptions | None = None,
        *,
        required_column: str | None = None,
    ) -> pd.DataFrame:
        if options is None:
            options = TermFileOptions()
        if not path.exists():
            raise DataSourceNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise DataSourceNotFoundError(f"Not a file: {path}")
        try:
            df = pd.read_csv(
                path,
                dtype=str,
                keep_default_na=False,
                na_values=[""],
                encoding=options.encoding,
            )
        except FileNotFoundError as e:
            raise DataSourceNotFoundError(f"File not found: {path}") from e
        except pd.errors.ParserError as e:
            raise DataParseError(f"Failed to parse CSV {path}: {e}") from e
        except pd.errors.EmptyDataError as e:
            raise DataParseError(f"CSV file is empty: {path}") from e
        except UnicodeDecodeError as e:
            raise DataParseError(
                f"Encoding error reading {path}. Try a different encoding: {e}"
            ) from e
        df.columns = [str(col).strip() for col in df.columns]
        if required_column is not None and required_column not in df.columns:
            raise DataParseError(
                f"CSV file has no '{required_column}' column: {path}"
            )
        return df

    def read_terms(
        self, path: Path, options: TermFileOptions | None = None
    ) -> list[SourceTerm]:
        if options is None:
            options = TermFileOptions()
        df = self.read(path, options)
        df.columns = [col.lower() for col in df.columns]
        if TERM_COLUMN not in df.columns:
            raise DataParseError(f"CSV file has no '{TERM_COLUMN}' column: {path}")
        return terms_from_frame(
            df,
            default_source=options.default_source,
            default_kind=options.default_kind,
        )


def terms_from_frame(
    df: pd.DataFrame,
    *,
    default_source: str = "default",
    default_kind: TermKind = TermKind.SPECIALTY,
) -> list[SourceTerm]:
    totals: dict[tuple[str, str], int] = {}
    kinds: dict[tuple[str, str], TermKind] = {}
    for row in df.to_dict(orient="records"):
        text = _cell(row.get(TERM_COLUMN))
        if not text:
            continue
        source = _cell(row.get(SOURCE_COLUMN)) or default_source
        key = (text, source)
        totals[key] = totals.get(key, 0) + _frequency(row.get(FREQUENCY_COLUMN))
        if key not in kinds:
            kinds[key] = _kind(row.get(KIND_COLUMN), default_kind)
    terms: list[SourceTerm] = []
    for (text, source), count in totals.items():
        terms.append(
            SourceTerm(
                text=text,
                source_id=source,
                frequency=count,
                kind=kinds[(text, source)],
            )
        )
    return terms


def _cell(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def _frequency(value: object) -> int:
    raw = _cell(value)
    if not raw:
        return 1
    try:
        count = int(float(raw))
    except ValueError as e:
        raise DataParseError(f"Invalid frequency: {raw!r}") from e
    if count < 0:
        raise DataParseError(f"Frequency must not be negative: {raw!r}")
    return count


def _kind(value: object, default: TermKind) -> TermKind:
    raw = _cell(value).lower()
    if not raw:
        return default
    try:
        return TermKind(raw)
    except ValueError as e:
        raise DataParseError(f"Unknown term kind: {raw!r}") from e
