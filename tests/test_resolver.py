"""
Tests for the contradiction resolver.

Focus on ties, pairwise cancellation, deduplication and the lookup index.
"""

import pytest

from picklist_ranker.exceptions import ValidationError
from picklist_ranker.models import Better, Comparison, Tie
from picklist_ranker.resolver import (
    ensure_known_teams,
    resolve_contradictions,
    validate_comparisons,
)


def beats(better: int, worse: int) -> Comparison:
    return Comparison(better, worse, Better(better))


class TestResolveContradictions:
    """Test resolve_contradictions behavior."""

    def test_direct_contradiction_cancels_both(self) -> None:
        """1>2 and 2>1 leave no judgment on the pair."""
        # Act
        resolved = resolve_contradictions([beats(1, 2), beats(2, 1)])

        # Assert
        assert resolved.comparisons == (), "Clean set should be empty"
        assert resolved.contradictions_dropped == 2
        assert dict(resolved.lookup) == {}

    def test_tie_is_excluded(self) -> None:
        """Ties never reach the clean set."""
        resolved = resolve_contradictions([Comparison(1, 2, Tie())])

        assert resolved.comparisons == ()
        assert resolved.ties_dropped == 1

    def test_majority_does_not_win(self) -> None:
        """Two votes against one still cancel the whole pair."""
        resolved = resolve_contradictions([beats(1, 2), beats(1, 2), beats(2, 1)])

        assert resolved.comparisons == (), "Pairwise cancellation, not vote counting"
        assert resolved.contradictions_dropped == 3

    def test_duplicates_collapse_keeping_first(self) -> None:
        """Repeated judgments, in either orientation, are kept once."""
        # Arrange
        first = beats(1, 2)
        flipped = Comparison(2, 1, Better(1))

        # Act
        resolved = resolve_contradictions([first, beats(3, 1), flipped])

        # Assert
        assert resolved.comparisons == (first, beats(3, 1))
        assert resolved.comparisons[0] is first, "First occurrence should be kept"
        assert resolved.duplicates_dropped == 1

    def test_transitive_cycle_is_kept(self) -> None:
        """Cycles are not contradictions on any single pair."""
        cycle = [beats(1, 2), beats(2, 3), beats(3, 1)]

        resolved = resolve_contradictions(cycle)

        assert list(resolved.comparisons) == cycle
        assert resolved.contradictions_dropped == 0

    def test_unrelated_pairs_survive_a_contradiction(self) -> None:
        resolved = resolve_contradictions([beats(1, 2), beats(2, 1), beats(3, 4)])

        assert resolved.comparisons == (beats(3, 4),)

    def test_idempotent(self) -> None:
        """Resolving a clean set changes nothing."""
        # Arrange
        raw = [beats(1, 2), beats(2, 1), beats(2, 3), Comparison(3, 4, Tie()), beats(2, 3), beats(4, 1)]
        once = resolve_contradictions(raw)

        # Act
        twice = resolve_contradictions(once.comparisons)

        # Assert
        assert twice.comparisons == once.comparisons
        assert twice.ties_dropped == 0
        assert twice.contradictions_dropped == 0
        assert twice.duplicates_dropped == 0

    def test_input_is_not_mutated(self) -> None:
        raw = [beats(1, 2), beats(2, 1), Comparison(1, 3, Tie())]
        before = list(raw)

        resolve_contradictions(raw)

        assert raw == before

    def test_lookup_indexes_both_teams(self) -> None:
        """Every clean comparison is listed under both of its teams."""
        # Arrange
        a, b = beats(1, 2), beats(3, 1)

        # Act
        resolved = resolve_contradictions([a, b])

        # Assert
        assert resolved.comparisons_for(1) == (a, b)
        assert resolved.comparisons_for(2) == (a,)
        assert resolved.comparisons_for(3) == (b,)
        assert resolved.comparisons_for(99) == ()
        with pytest.raises(TypeError):
            resolved.lookup[4] = ()  # type: ignore[index]


class TestValidateComparisons:
    """Test validation against the known team set."""

    def test_rejects_unknown_teams(self) -> None:
        # Arrange
        good = beats(1, 2)
        bad = beats(1, 99)

        # Act
        report = validate_comparisons([good, bad], known_teams=[1, 2, 3])

        # Assert
        assert report.accepted == [good]
        assert report.rejected_count == 1
        assert report.rejected[0][0] == bad
        assert "99" in report.rejected[0][1]

    def test_ensure_known_teams(self) -> None:
        resolved = resolve_contradictions([beats(1, 2)])

        ensure_known_teams(resolved, [1, 2])
        with pytest.raises(ValidationError, match="outside the ranked set"):
            ensure_known_teams(resolved, [1])
