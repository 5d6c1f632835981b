"""Integration tests for CLI commands.

Each test drives the real command stack (container, JSON store, execution
host) against a store file in a temporary directory.
"""

import json
from pathlib import Path

from click.testing import CliRunner
import pytest

from survey_mapper.cli import app

TERMS_CSV = (
    "term,source,frequency\n"
    "Cardiology,mgma,12\n"
    "Cardiac Medicine,sullivan,3\n"
    "Orthopedics,mgma,7\n"
)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "terms.csv").write_text(TERMS_CSV)
    return tmp_path


@pytest.fixture
def store(workspace: Path) -> Path:
    return workspace / "store.json"


def _invoke(runner, store: Path, *args: str):
    return runner.invoke(app, [*args, "--store", str(store)])


@pytest.mark.integration
class TestMappingCommands:
    def test_help_lists_commands(self, runner):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for name in ("automap", "mappings", "learned", "unmapped", "reset"):
            assert name in result.output

    def test_create_and_list(self, runner, store):
        created = _invoke(
            runner, store, "create", "Cardiology", "--term", "Heart", "--source", "amga"
        )
        listed = _invoke(runner, store, "mappings")

        assert created.exit_code == 0, created.output
        assert "Created mapping" in created.output
        assert "Cardiology" in listed.output
        assert "Heart" in listed.output
        document = json.loads(store.read_text())
        assert document["mappings"][0]["source_terms"][0]["source_id"] == "amga"

    def test_create_rejects_mapped_term(self, runner, store):
        _invoke(runner, store, "create", "Cardiology", "--term", "Heart")

        result = _invoke(runner, store, "create", "Cardiac", "--term", "Heart")

        assert result.exit_code == 1
        assert "Terms already mapped" in result.output

    def test_delete(self, runner, store):
        _invoke(runner, store, "create", "Cardiology", "--term", "Heart")
        mapping_id = json.loads(store.read_text())["mappings"][0]["id"]

        result = _invoke(runner, store, "delete", mapping_id)

        assert result.exit_code == 0, result.output
        assert "1 terms unmapped" in result.output
        assert json.loads(store.read_text())["mappings"] == []

    def test_delete_unknown(self, runner, store):
        result = _invoke(runner, store, "delete", "missing")

        assert result.exit_code == 1
        assert "Mapping not found: missing" in result.output

    def test_learn_list_and_forget(self, runner, store):
        learned = _invoke(runner, store, "learn", "Peds", "Pediatrics")
        listed = _invoke(runner, store, "learned")
        forgot = _invoke(runner, store, "forget", "Peds")
        again = _invoke(runner, store, "forget", "Peds")

        assert learned.exit_code == 0, learned.output
        assert "Pediatrics" in listed.output
        assert forgot.exit_code == 0
        assert again.exit_code == 1
        assert "No learned correction" in again.output

    def test_reset(self, runner, store):
        _invoke(runner, store, "create", "Cardiology")
        _invoke(runner, store, "learn", "Peds", "Pediatrics")

        result = _invoke(runner, store, "reset", "--yes")

        assert result.exit_code == 0, result.output
        document = json.loads(store.read_text())
        assert document["mappings"] == []
        assert document["learned_corrections"] == []

    def test_reset_needs_confirmation(self, runner, store):
        _invoke(runner, store, "create", "Cardiology")

        result = runner.invoke(app, ["reset", "--store", str(store)], input="n\n")

        assert result.exit_code == 1
        assert len(json.loads(store.read_text())["mappings"]) == 1


@pytest.mark.integration
class TestAutoMapCommand:
    def test_preview_does_not_save(self, runner, store, workspace):
        _invoke(runner, store, "create", "Cardiology")

        result = _invoke(runner, store, "automap", str(workspace / "terms.csv"))

        assert result.exit_code == 0, result.output
        assert "Mapping Suggestions" in result.output
        assert "Cardiac Medicine" in result.output
        assert "Unmatched: 1" in result.output
        assert json.loads(store.read_text())["mappings"][0]["source_terms"] == []

    def test_accept_then_unmapped(self, runner, store, workspace):
        _invoke(runner, store, "create", "Cardiology")

        accepted = _invoke(
            runner, store, "automap", str(workspace / "terms.csv"), "--accept"
        )
        unmapped = _invoke(runner, store, "unmapped", str(workspace / "terms.csv"))
        rerun = _invoke(runner, store, "automap", str(workspace / "terms.csv"))

        assert accepted.exit_code == 0, accepted.output
        assert "Extended 1 mappings" in accepted.output
        assert "Orthopedics" in unmapped.output
        assert "Cardiac Medicine" not in unmapped.output
        assert "No suggestions above the threshold" in rerun.output

    def test_accept_with_learning(self, runner, store, workspace):
        _invoke(runner, store, "create", "Cardiology")

        _invoke(
            runner,
            store,
            "automap",
            str(workspace / "terms.csv"),
            "--accept",
            "--learn",
        )

        corrections = json.loads(store.read_text())["learned_corrections"]
        assert [c["original_text"] for c in corrections] == ["Cardiac Medicine"]

    def test_no_mappings_means_no_suggestions(self, runner, store, workspace):
        result = _invoke(runner, store, "automap", str(workspace / "terms.csv"))

        assert result.exit_code == 0, result.output
        assert "No suggestions above the threshold" in result.output

    def test_invalid_threshold(self, runner, store, workspace):
        result = _invoke(
            runner, store, "automap", str(workspace / "terms.csv"), "--threshold", "1.5"
        )

        assert result.exit_code == 2

    def test_all_terms_mapped(self, runner, store, workspace):
        terms = workspace / "one.csv"
        terms.write_text("term\nHeart\n")
        _invoke(runner, store, "create", "Cardiology", "--term", "Heart")

        result = _invoke(runner, store, "automap", str(terms))

        assert "All terms are already mapped" in result.output

    def test_invalid_settings(self, runner, store, workspace, monkeypatch):
        monkeypatch.setenv("MIN_CONFIDENCE", "3.0")

        result = _invoke(runner, store, "automap", str(workspace / "terms.csv"))

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


@pytest.mark.integration
class TestApplyCorrectionsCommand:
    def test_rewrites_column(self, runner, store, workspace):
        data = workspace / "survey.csv"
        data.write_text("Specialty,Count\nPeds,3\npeds,1\nCardiology,2\n")
        output = workspace / "fixed.csv"
        _invoke(runner, store, "learn", "Peds", "Pediatrics")

        result = _invoke(
            runner,
            store,
            "apply-corrections",
            str(data),
            "--column",
            "Specialty",
            "--output",
            str(output),
        )

        assert result.exit_code == 0, result.output
        assert "Applied 2 corrections across 3 rows" in result.output
        assert output.read_text().splitlines() == [
            "Specialty,Count",
            "Pediatrics,3",
            "Pediatrics,1",
            "Cardiology,2",
        ]

    def test_missing_column(self, runner, store, workspace):
        data = workspace / "survey.csv"
        data.write_text("Name\nPeds\n")

        result = _invoke(
            runner, store, "apply-corrections", str(data), "--column", "Specialty"
        )

        assert result.exit_code == 1
        assert "no 'Specialty' column" in result.output
