"""
Tests for JSONLComparisonSource.

Focus on skipping malformed lines and deriving the team set.
"""

import json
import tempfile
from pathlib import Path

import pytest

from picklist_ranker.models import Better, Comparison, Tie
from picklist_ranker.sources import JSONLComparisonSource


def write_lines(path: Path, lines: list[str]) -> None:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


class TestJSONLComparisonSource:
    """Test JSONLComparisonSource behavior through public interface."""

    def test_loads_valid_records(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            path = Path(temp_dir) / "comparisons.jsonl"
            write_lines(path, [
                json.dumps({"team_a": 254, "team_b": 1678, "better_team": 1678}),
                json.dumps({"team_a": 971, "team_b": 254, "better_team": 0}),
            ])
            source = JSONLComparisonSource(path)

            # Act
            comparisons = list(source.list_comparisons())
            teams = list(source.list_teams())

            # Assert
            assert comparisons == [Comparison(254, 1678, Better(1678)), Comparison(971, 254, Tie())]
            assert teams == [254, 971, 1678], "Teams should be sorted when inferred"
            assert source.rejected_count == 0

    def test_malformed_lines_are_skipped_and_counted(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            path = Path(temp_dir) / "comparisons.jsonl"
            write_lines(path, [
                json.dumps({"team_a": 1, "team_b": 2, "better_team": 1}),
                "{not json",
                json.dumps({"team_a": 3, "team_b": 3, "better_team": 3}),
                json.dumps({"team_a": 1, "team_b": 2, "better_team": 5}),
                json.dumps({"team_a": 1, "better_team": 1}),
                "",
                json.dumps({"team_a": 2, "team_b": 3, "better_team": 3}),
            ])
            source = JSONLComparisonSource(path)

            # Act
            comparisons = list(source.list_comparisons())

            # Assert
            assert len(comparisons) == 2, "Only the two valid records should load"
            assert source.rejected_count == 4
            assert list(source.list_teams()) == [1, 2, 3]

    def test_teams_file_overrides_inference(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            path = Path(temp_dir) / "comparisons.jsonl"
            teams_path = Path(temp_dir) / "teams.json"
            write_lines(path, [json.dumps({"team_a": 1, "team_b": 2, "better_team": 2})])
            teams_path.write_text(json.dumps([5, 1, 2, 5]), encoding="utf-8")
            source = JSONLComparisonSource(path, teams_path)

            # Act
            teams = list(source.list_teams())

            # Assert
            assert teams == [5, 1, 2], "Duplicates dropped, file order kept"

    def test_reload_picks_up_new_lines(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "comparisons.jsonl"
            write_lines(path, [json.dumps({"team_a": 1, "team_b": 2, "better_team": 2})])
            source = JSONLComparisonSource(path)
            assert len(list(source.list_comparisons())) == 1

            with open(path, "a", encoding="utf-8") as f:
                f.write(json.dumps({"team_a": 2, "team_b": 3, "better_team": 2}) + "\n")
            source.reload()

            assert len(list(source.list_comparisons())) == 2

    def test_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError, match="Comparisons file does not exist"):
            JSONLComparisonSource(Path("/nonexistent/comparisons.jsonl"))

    def test_directory_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with pytest.raises(IsADirectoryError):
                JSONLComparisonSource(Path(temp_dir))
