"""Tests for search, grouping and statistics helpers."""

import pytest

from survey_mapper.domain.entities import SourceTerm, StandardizedMapping
from survey_mapper.domain.services import (
    calculate_mapping_stats,
    filter_learned_corrections,
    filter_mappings,
    filter_unmapped_terms,
    flexible_word_match,
    group_terms_by_source,
)

TERMS = [
    SourceTerm("Cardiac Surgery", "mgma", frequency=12),
    SourceTerm("Surgery - Cardiac", "sullivan", frequency=3),
    SourceTerm("Pediatric Cardiology", "amga", frequency=1),
    SourceTerm("Orthopedics", "mgma", frequency=7),
]


class TestFlexibleWordMatch:
    @pytest.mark.parametrize(
        ("text", "search", "expected"),
        [
            ("Cardiac Surgery", "surgery cardiac", True),
            ("Surgery - Cardiac", "cardiac surgery", True),
            ("Pediatric Cardiology", "cardio", True),
            ("Orthopedics", "cardiac", False),
            ("Cardiac Surgery", "cardiac thoracic", False),
            ("Anything", "", True),
            ("Anything", " - ", True),
        ],
    )
    def test_match(self, text, search, expected):
        assert flexible_word_match(text, search) is expected


class TestFilterUnmappedTerms:
    def test_search_matches_text_or_source(self):
        assert filter_unmapped_terms(TERMS, search="cardiac surgery") == TERMS[:2]
        assert filter_unmapped_terms(TERMS, search="amga") == [TERMS[2]]

    def test_source_filter(self):
        assert filter_unmapped_terms(TERMS, source_id="mgma") == [TERMS[0], TERMS[3]]

    def test_min_frequency(self):
        assert filter_unmapped_terms(TERMS, min_frequency=5) == [TERMS[0], TERMS[3]]

    def test_filters_combine(self):
        selected = filter_unmapped_terms(
            TERMS, search="cardiac", source_id="mgma", min_frequency=10
        )

        assert selected == [TERMS[0]]

    def test_no_filters_keeps_everything(self):
        assert filter_unmapped_terms(TERMS) == TERMS


class TestFilterMappings:
    mappings = [
        StandardizedMapping(
            id="cardio",
            standardized_name="Cardiology",
            source_terms=(SourceTerm("Heart Medicine", "mgma"),),
        ),
        StandardizedMapping(id="ortho", standardized_name="Orthopedic Surgery"),
    ]

    def test_matches_name(self):
        assert filter_mappings(self.mappings, "surgery") == [self.mappings[1]]

    def test_matches_member_text(self):
        assert filter_mappings(self.mappings, "heart") == [self.mappings[0]]

    def test_empty_search(self):
        assert filter_mappings(self.mappings, "") == self.mappings


def test_filter_learned_corrections():
    corrections = {"Peds": "Pediatrics", "Cardiac Surg": "Cardiac Surgery"}

    assert filter_learned_corrections(corrections, "pediatrics") == {
        "Peds": "Pediatrics"
    }
    assert filter_learned_corrections(corrections, "surg") == {
        "Cardiac Surg": "Cardiac Surgery"
    }
    assert filter_learned_corrections(corrections, "") == corrections


def test_group_terms_by_source():
    grouped = group_terms_by_source(TERMS)

    assert list(grouped) == ["mgma", "sullivan", "amga"]
    assert grouped["mgma"] == [TERMS[0], TERMS[3]]


class TestMappingStats:
    def test_stats(self):
        mappings = [
            StandardizedMapping(
                standardized_name="Cardiology",
                source_terms=(
                    SourceTerm("Cardiology", "mgma"),
                    SourceTerm("Cardiac", "amga"),
                    SourceTerm("Heart", "sullivan"),
                ),
            ),
            StandardizedMapping(
                standardized_name="Orthopedics",
                source_terms=(SourceTerm("Ortho", "mgma"),),
            ),
        ]

        stats = calculate_mapping_stats(mappings, TERMS)

        assert stats.total_mappings == 2
        assert stats.total_source_terms == 4
        assert stats.average_terms_per_mapping == 2.0
        assert stats.total_unmapped == 4
        assert stats.most_common_unmapped_source == "mgma"

    def test_empty(self):
        stats = calculate_mapping_stats([], [])

        assert stats.average_terms_per_mapping == 0.0
        assert stats.most_common_unmapped_source == ""
