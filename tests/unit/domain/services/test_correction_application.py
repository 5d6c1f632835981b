"""Tests for rewriting survey columns with learned corrections."""

import pandas as pd
import pytest

from survey_mapper.domain.services import apply_learned_corrections

CORRECTIONS = {"Peds": "Pediatrics", "Cardiac Surg": "Cardiac Surgery"}


@pytest.fixture
def frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "specialty": ["Peds", "peds", "Cardiac Surg", "Pediatrics", None, "ENT"],
            "count": [1, 2, 3, 4, 5, 6],
        }
    )


def test_exact_then_case_insensitive(frame):
    result = apply_learned_corrections(frame, "specialty", CORRECTIONS)

    assert result.frame["specialty"].tolist()[:4] == [
        "Pediatrics",
        "Pediatrics",
        "Cardiac Surgery",
        "Pediatrics",
    ]
    assert result.frame["specialty"].iloc[5] == "ENT"
    assert pd.isna(result.frame["specialty"].iloc[4])


def test_counts(frame):
    result = apply_learned_corrections(frame, "specialty", CORRECTIONS)

    assert result.rows_processed == 6
    assert result.corrections_applied == 3
    assert result.terms_updated == {"Peds": 1, "peds": 1, "Cardiac Surg": 1}


def test_input_frame_untouched(frame):
    original = frame.copy()

    apply_learned_corrections(frame, "specialty", CORRECTIONS)

    pd.testing.assert_frame_equal(frame, original)


def test_already_corrected_values_not_counted():
    frame = pd.DataFrame({"specialty": ["Pediatrics"]})

    result = apply_learned_corrections(frame, "specialty", {"Pediatrics": "Pediatrics"})

    assert result.corrections_applied == 0
    assert result.terms_updated == {}


def test_no_corrections(frame):
    result = apply_learned_corrections(frame, "specialty", {})

    assert result.corrections_applied == 0
    assert result.rows_processed == 6
    pd.testing.assert_frame_equal(result.frame, frame)


def test_missing_column(frame):
    with pytest.raises(KeyError, match="Column not found"):
        apply_learned_corrections(frame, "missing", CORRECTIONS)
