"""
Tests for SimulatedComparisonSource.

Focus on ground truth + noise behavior.
"""

import pytest

from picklist_ranker.exceptions import ConfigurationError
from picklist_ranker.sources import SimulatedComparisonSource


class TestSimulatedComparisonSource:
    """Test SimulatedComparisonSource behavior through public interface."""

    def test_zero_noise_follows_ground_truth(self) -> None:
        """With noise=0, the stronger team always wins."""
        # Arrange
        ground_truth = {1: 10.0, 2: 5.0, 3: 1.0}
        source = SimulatedComparisonSource(ground_truth, matches=50, noise=0.0, seed=1)

        # Act
        comparisons = list(source.list_comparisons())

        # Assert
        assert len(comparisons) == 50
        for comparison in comparisons:
            assert comparison.better_team == min(comparison.pair), f"{comparison} contradicts ground truth"

    def test_same_seed_same_judgments(self) -> None:
        first = SimulatedComparisonSource.with_linear_strengths(6, matches=40, noise=0.5, seed=9)
        second = SimulatedComparisonSource.with_linear_strengths(6, matches=40, noise=0.5, seed=9)

        assert list(first.list_comparisons()) == list(second.list_comparisons())

    def test_judgments_are_cached(self) -> None:
        source = SimulatedComparisonSource.with_linear_strengths(4, matches=10, noise=0.3)

        assert list(source.list_comparisons()) == list(source.list_comparisons())

    def test_noise_adds_upsets(self) -> None:
        """High noise produces at least one win for the weaker team."""
        source = SimulatedComparisonSource({1: 1.0, 2: 1.2}, matches=200, noise=1.0, seed=4)

        winners = {comparison.better_team for comparison in source.list_comparisons()}

        assert winners == {1, 2}

    def test_tie_margin_records_ties(self) -> None:
        source = SimulatedComparisonSource({1: 1.0, 2: 1.5}, matches=5, noise=0.0, tie_margin=1.0, seed=2)

        assert all(comparison.is_tie for comparison in source.list_comparisons())

    def test_linear_strengths(self) -> None:
        source = SimulatedComparisonSource.with_linear_strengths(4, matches=0)

        assert list(source.list_teams()) == [1, 2, 3, 4]
        assert source.get_ground_truth_order() == [4, 3, 2, 1]
        assert list(source.list_comparisons()) == []

    def test_noise_clamped(self) -> None:
        source = SimulatedComparisonSource({1: 1.0, 2: 2.0}, noise=3.0)

        assert source.noise == 1.0

    def test_needs_two_teams(self) -> None:
        with pytest.raises(ConfigurationError, match="at least two teams"):
            SimulatedComparisonSource({1: 1.0})
