"""Term-list input adapters."""

from .exceptions import DataParseError, DataSourceError, DataSourceNotFoundError
from .term_extraction import (
    TermFileOptions,
    TermFileReader,
    extract_source_terms,
    terms_from_frame,
)

__all__ = [
    "DataParseError",
    "DataSourceError",
    "DataSourceNotFoundError",
    "TermFileOptions",
    "TermFileReader",
    "extract_source_terms",
    "terms_from_frame",
]
