"""
Tests for RankingTree.

Focus on insertion shifts, level compaction and the contiguity invariant.
"""

import pytest

from picklist_ranker.exceptions import TreeInvariantError
from picklist_ranker.models import Better, Comparison, Tie
from picklist_ranker.ranking_tree import RankingTree


def beats(better: int, worse: int) -> Comparison:
    return Comparison(better, worse, Better(better))


class TestConstruction:
    """Test the tree constructors."""

    def test_from_ordered_list_is_best_first(self) -> None:
        tree = RankingTree.from_ordered_list([7, 3, 5])

        assert tree.levels == {7: 2, 3: 1, 5: 0}
        assert tree.to_ordered_list() == [7, 3, 5]

    def test_from_scores_dense_ranks(self) -> None:
        """Equal scores share a level and levels stay contiguous."""
        tree = RankingTree.from_scores({1: 2.0, 2: 0.0, 3: -2.0, 4: 0.0})

        assert tree.levels == {1: 2, 2: 1, 3: 0, 4: 1}

    def test_from_level_map_rejects_gap(self) -> None:
        with pytest.raises(TreeInvariantError, match="empty levels"):
            RankingTree.from_level_map({1: 0, 2: 2})

    def test_empty_tree(self) -> None:
        tree = RankingTree()

        assert len(tree) == 0
        assert tree.max_level == -1
        assert tree.to_ordered_list() == []
        assert tree.level_groups() == []

    def test_clone_is_independent(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2])
        copy = tree.clone()

        copy.promote(2)

        assert tree.levels == {1: 1, 2: 0}, "Original should be untouched"
        assert copy != tree


class TestInsertion:
    """Test the add_node family."""

    def test_add_node_only_on_empty_tree(self) -> None:
        tree = RankingTree()
        tree.add_node(1)

        assert tree.levels == {1: 0}
        with pytest.raises(ValueError, match="non-empty tree"):
            tree.add_node(2)

    def test_add_node_above_shifts_higher_levels(self) -> None:
        """Teams above the relative move up to make room."""
        # Arrange
        tree = RankingTree.from_ordered_list([1, 2, 3])

        # Act
        tree.add_node_above(4, 3)

        # Assert
        assert tree.levels == {1: 3, 2: 2, 4: 1, 3: 0}

    def test_add_node_below_shifts_relative_level(self) -> None:
        """The relative and everything above it move up."""
        # Arrange
        tree = RankingTree.from_ordered_list([1, 2, 3])

        # Act
        tree.add_node_below(4, 2)

        # Assert
        assert tree.levels == {1: 3, 2: 2, 4: 1, 3: 0}

    def test_add_node_alongside_shares_level(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2])

        tree.add_node_alongside(3, 2)

        assert tree.levels == {1: 1, 2: 0, 3: 0}
        assert tree.level_groups() == [[1], [2, 3]]

    def test_insert_existing_team_rejected(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2])

        with pytest.raises(ValueError, match="already in tree"):
            tree.add_node_above(2, 1)

    def test_insert_relative_to_missing_team_rejected(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2])

        with pytest.raises(KeyError):
            tree.add_node_below(3, 42)


class TestPromoteDemote:
    """Test moving teams between levels."""

    def test_promote_above_top_opens_new_level(self) -> None:
        tree = RankingTree.from_level_map({1: 0, 2: 0})

        tree.promote(2)

        assert tree.levels == {1: 0, 2: 1}

    def test_promote_compacts_vacated_level(self) -> None:
        """Leaving a level empty closes it."""
        # Arrange
        tree = RankingTree.from_ordered_list([1, 2, 3])  # 1:2, 2:1, 3:0

        # Act
        tree.promote(3)

        # Assert
        assert tree.levels == {1: 1, 2: 0, 3: 0}, "Level 0 should close after 3 left"
        assert set(tree.levels.values()) == {0, 1}

    def test_demote_at_floor_is_noop(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2])

        tree.demote(2)

        assert tree.levels == {1: 1, 2: 0}

    def test_demote_compacts_vacated_level(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2, 3])

        tree.demote(2)

        assert tree.levels == {1: 1, 2: 0, 3: 0}

    def test_promote_undoes_demote_when_level_stays_occupied(self) -> None:
        # Arrange
        tree = RankingTree.from_level_map({1: 1, 2: 1, 3: 0})
        before = tree.clone()

        # Act
        tree.demote(2)
        tree.promote(2)

        # Assert
        assert tree == before

    def test_levels_stay_contiguous_through_mutations(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2, 3, 4, 5])
        for team in (5, 5, 3, 1, 1, 2, 4, 4, 4):
            tree.promote(team)
            tree.demote(6 - team)
            occupied = set(tree.levels.values())
            assert occupied == set(range(tree.max_level + 1)), f"Gap after moving {team}"


class TestScoring:
    """Test compliance and export."""

    def test_compliance_of_chain(self) -> None:
        tree = RankingTree.from_ordered_list([1, 2, 3])
        comparisons = [beats(1, 2), beats(2, 3), beats(3, 1)]

        assert tree.get_compliance_percent(comparisons) == pytest.approx(200 / 3)
        assert tree.is_comparison_compliant(beats(1, 3))
        assert not tree.is_comparison_compliant(beats(3, 1))

    def test_same_level_is_not_compliant(self) -> None:
        tree = RankingTree.from_level_map({1: 0, 2: 0})

        assert not tree.is_comparison_compliant(beats(1, 2))
        assert tree.is_comparison_compliant(Comparison(1, 2, Tie()))

    def test_ordered_list_breaks_ties_by_team_number(self) -> None:
        tree = RankingTree.from_level_map({30: 1, 10: 0, 20: 1, 5: 0})

        assert tree.to_ordered_list() == [20, 30, 5, 10]
