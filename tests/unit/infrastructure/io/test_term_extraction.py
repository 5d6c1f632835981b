"""Unit tests for term-list input adapters."""

from pathlib import Path

import pandas as pd
import pytest

from survey_mapper.domain.entities import SourceTerm, TermKind
from survey_mapper.infrastructure.io import (
    DataParseError,
    DataSourceNotFoundError,
    TermFileOptions,
    TermFileReader,
    extract_source_terms,
    terms_from_frame,
)


class TestExtractSourceTerms:
    def test_counts_distinct_values_in_first_seen_order(self):
        frame = pd.DataFrame(
            {"Specialty": ["Cardiology", " Peds", "Cardiology", None, "", "Peds"]}
        )

        terms = extract_source_terms(frame, column="Specialty", source_id="mgma")

        assert terms == [
            SourceTerm("Cardiology", "mgma", frequency=2),
            SourceTerm("Peds", "mgma", frequency=2),
        ]

    def test_kind_is_passed_through(self):
        frame = pd.DataFrame({"header": ["Total Comp"]})

        terms = extract_source_terms(
            frame, column="header", source_id="amga", kind=TermKind.COLUMN
        )

        assert terms[0].kind is TermKind.COLUMN

    def test_missing_column(self):
        with pytest.raises(DataParseError, match="Column not found"):
            extract_source_terms(pd.DataFrame(), column="Specialty", source_id="x")


class TestTermFileReader:
    def test_read_terms(self, tmp_path: Path):
        csv_file = tmp_path / "terms.csv"
        csv_file.write_text(
            "Term,Source,Frequency,Kind\n"
            "Cardiology,mgma,3,\n"
            "Cardiology,mgma,2,\n"
            "Cardiology,amga,,\n"
            "Base Salary,amga,1,column\n"
        )

        terms = TermFileReader().read_terms(csv_file)

        assert terms == [
            SourceTerm("Cardiology", "mgma", frequency=5),
            SourceTerm("Cardiology", "amga", frequency=1),
            SourceTerm("Base Salary", "amga", frequency=1, kind=TermKind.COLUMN),
        ]

    def test_default_source(self, tmp_path: Path):
        csv_file = tmp_path / "terms.csv"
        csv_file.write_text("term\nPeds\n  \n")

        terms = TermFileReader().read_terms(
            csv_file, TermFileOptions(default_source="sullivan")
        )

        assert terms == [SourceTerm("Peds", "sullivan")]

    def test_headers_are_stripped(self, tmp_path: Path):
        csv_file = tmp_path / "data.csv"
        csv_file.write_text(" Specialty , Count\nPeds,1\n")

        df = TermFileReader().read(csv_file, required_column="Specialty")

        assert list(df.columns) == ["Specialty", "Count"]
        assert df.iloc[0, 0] == "Peds"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(DataSourceNotFoundError, match="File not found"):
            TermFileReader().read(tmp_path / "missing.csv")

    def test_directory_is_not_a_file(self, tmp_path: Path):
        with pytest.raises(DataSourceNotFoundError, match="Not a file"):
            TermFileReader().read(tmp_path)

    def test_empty_file(self, tmp_path: Path):
        csv_file = tmp_path / "empty.csv"
        csv_file.write_text("")

        with pytest.raises(DataParseError, match="empty"):
            TermFileReader().read(csv_file)

    def test_missing_term_column(self, tmp_path: Path):
        csv_file = tmp_path / "terms.csv"
        csv_file.write_text("name\nPeds\n")

        with pytest.raises(DataParseError, match="no 'term' column"):
            TermFileReader().read_terms(csv_file)

    def test_missing_required_column(self, tmp_path: Path):
        csv_file = tmp_path / "data.csv"
        csv_file.write_text("name\nPeds\n")

        with pytest.raises(DataParseError, match="no 'Specialty' column"):
            TermFileReader().read(csv_file, required_column="Specialty")


class TestTermsFromFrame:
    def test_invalid_frequency(self):
        frame = pd.DataFrame({"term": ["Peds"], "frequency": ["many"]})

        with pytest.raises(DataParseError, match="Invalid frequency"):
            terms_from_frame(frame)

    def test_negative_frequency(self):
        frame = pd.DataFrame({"term": ["Peds"], "frequency": ["-2"]})

        with pytest.raises(DataParseError, match="must not be negative"):
            terms_from_frame(frame)

    def test_unknown_kind(self):
        frame = pd.DataFrame({"term": ["Peds"], "kind": ["region"]})

        with pytest.raises(DataParseError, match="Unknown term kind"):
            terms_from_frame(frame)

    def test_default_kind(self):
        frame = pd.DataFrame({"term": ["Salary"]})

        terms = terms_from_frame(frame, default_kind=TermKind.COLUMN)

        assert terms == [SourceTerm("Salary", "default", kind=TermKind.COLUMN)]
