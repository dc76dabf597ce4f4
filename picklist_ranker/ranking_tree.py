"""
Leveled ranking tree.

Maps each team to a non-negative level; a higher level means a better team and
teams sharing a level are tied. Levels always form the contiguous range
[0, max_level] once a mutation settles.
"""

from collections.abc import Iterable, Mapping, Sequence

from .compliance import compliance_percent
from .exceptions import TreeInvariantError
from .models import Comparison


class RankingTree:
    """
    Leveled hierarchy representing a (partial) total order of teams.

    Cheap to clone: search strategies snapshot a tree, explore mutations on the
    copy and roll back by keeping the snapshot.
    """

    def __init__(self) -> None:
        self._levels: dict[int, int] = {}

    @classmethod
    def from_level_map(cls, levels: Mapping[int, int]) -> "RankingTree":
        """Restore a tree from a team -> level mapping (e.g. a snapshot)."""
        tree = cls()
        tree._levels = dict(levels)
        tree._check_invariants()
        return tree

    @classmethod
    def from_ordered_list(cls, ordered_teams: Sequence[int]) -> "RankingTree":
        """
        Give each team its own level following a best-first ordering.

        The first team receives the top level and the last team level 0.
        """
        if len(set(ordered_teams)) != len(ordered_teams):
            raise ValueError("ordered_teams cannot contain duplicates")
        top = len(ordered_teams) - 1
        tree = cls()
        tree._levels = {team: top - position for position, team in enumerate(ordered_teams)}
        return tree

    @classmethod
    def from_scores(cls, scores: Mapping[int, float]) -> "RankingTree":
        """Dense-rank arbitrary scores into levels; equal scores share a level."""
        distinct = sorted(set(scores.values()))
        level_of_score = {score: level for level, score in enumerate(distinct)}
        tree = cls()
        tree._levels = {team: level_of_score[score] for team, score in scores.items()}
        return tree

    def clone(self) -> "RankingTree":
        tree = RankingTree()
        tree._levels = dict(self._levels)
        return tree

    @property
    def levels(self) -> dict[int, int]:
        """Copy of the team -> level mapping."""
        return dict(self._levels)

    @property
    def max_level(self) -> int:
        """Highest occupied level, or -1 for an empty tree."""
        return max(self._levels.values(), default=-1)

    def get_max_level(self) -> int:
        return self.max_level

    def get_level(self, team: int) -> int:
        try:
            return self._levels[team]
        except KeyError:
            raise KeyError(f"Team not in tree: {team}") from None

    def contains_node(self, team: int) -> bool:
        return team in self._levels

    def __contains__(self, team: object) -> bool:
        return team in self._levels

    def __len__(self) -> int:
        return len(self._levels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RankingTree):
            return NotImplemented
        return self._levels == other._levels

    def __repr__(self) -> str:
        return f"RankingTree({self.level_groups()})"

    # Structural mutation

    def add_node(self, team: int) -> None:
        """Insert the first team of an empty tree at level 0."""
        if self._levels:
            raise ValueError(
                f"Cannot add {team} to a non-empty tree without a relative team; "
                "use add_node_above, add_node_below or add_node_alongside"
            )
        self._levels[team] = 0

    def add_node_above(self, team: int, relative: int) -> None:
        """Place ``team`` on a new level directly above ``relative``."""
        self._ensure_absent(team)
        target = self.get_level(relative) + 1
        self._shift_from(target)
        self._levels[team] = target
        self._check_invariants()

    def add_node_below(self, team: int, relative: int) -> None:
        """Place ``team`` on a new level directly below ``relative``."""
        self._ensure_absent(team)
        target = self.get_level(relative)
        self._shift_from(target)
        self._levels[team] = target
        self._check_invariants()

    def add_node_alongside(self, team: int, relative: int) -> None:
        """Place ``team`` on the same level as ``relative``."""
        self._ensure_absent(team)
        self._levels[team] = self.get_level(relative)

    def promote(self, team: int) -> None:
        """
        Move a team up one level.

        Promoting past the top opens a new top level. If the team's old level
        becomes empty it is closed and every level above drops by one.
        """
        old_level = self.get_level(team)
        self._levels[team] = old_level + 1
        self._close_if_empty(old_level)
        self._check_invariants()

    def demote(self, team: int) -> None:
        """Move a team down one level; a team already on level 0 stays put."""
        old_level = self.get_level(team)
        if old_level == 0:
            return
        self._levels[team] = old_level - 1
        self._close_if_empty(old_level)
        self._check_invariants()

    def _ensure_absent(self, team: int) -> None:
        if team in self._levels:
            raise ValueError(f"Team already in tree: {team}")

    def _shift_from(self, level: int) -> None:
        """Push every team at or above ``level`` up by one."""
        for team, current in self._levels.items():
            if current >= level:
                self._levels[team] = current + 1

    def _close_if_empty(self, level: int) -> None:
        if level in self._levels.values():
            return
        for team, current in self._levels.items():
            if current > level:
                self._levels[team] = current - 1

    def _check_invariants(self) -> None:
        occupied = set(self._levels.values())
        if not occupied:
            return
        if min(occupied) < 0:
            raise TreeInvariantError(f"Negative level in tree: {sorted(occupied)}")
        expected = set(range(max(occupied) + 1))
        if occupied != expected:
            missing = sorted(expected - occupied)
            raise TreeInvariantError(f"Ranking tree has empty levels {missing}")

    # Scoring and export

    def is_comparison_compliant(self, comparison: Comparison) -> bool:
        """True for ties, otherwise iff the better team sits strictly higher."""
        if comparison.is_tie:
            return True
        better = self._levels.get(comparison.better_team)  # type: ignore[arg-type]
        worse = self._levels.get(comparison.worse_team)  # type: ignore[arg-type]
        if better is None or worse is None:
            return False
        return better > worse

    def get_compliance_percent(self, comparisons: Iterable[Comparison]) -> float:
        return compliance_percent(self._levels, comparisons)

    def to_ordered_list(self) -> list[int]:
        """Flatten best first; teams sharing a level are ordered by ascending id."""
        return sorted(self._levels, key=lambda team: (-self._levels[team], team))

    def level_groups(self) -> list[list[int]]:
        """Teams grouped per level, top level first, ids ascending inside a level."""
        groups = [list[int]() for _ in range(self.max_level + 1)]
        for team in sorted(self._levels):
            groups[self.max_level - self._levels[team]].append(team)
        return groups
