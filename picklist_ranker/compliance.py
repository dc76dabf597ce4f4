"""
Compliance scoring.

Compliance percent is the share of non-tie comparisons that a level
assignment satisfies (better team strictly above the worse team). It is the
fitness function every ranking strategy maximizes.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

import numpy as np

from .exceptions import ValidationError
from .models import Comparison

if TYPE_CHECKING:
    from .ranking_tree import RankingTree


def compliance_percent(levels: Mapping[int, int], comparisons: Iterable[Comparison]) -> float:
    """
    Percentage of non-tie comparisons satisfied by ``levels``.

    Ties are left out of the denominator. With no non-tie comparisons the
    result is 100. A comparison naming a team missing from ``levels`` counts
    as unsatisfied.
    """
    total = 0
    satisfied = 0
    for comparison in comparisons:
        if comparison.is_tie:
            continue
        total += 1
        better = levels.get(comparison.better_team)  # type: ignore[arg-type]
        worse = levels.get(comparison.worse_team)  # type: ignore[arg-type]
        if better is not None and worse is not None and better > worse:
            satisfied += 1
    if total == 0:
        return 100.0
    return 100.0 * satisfied / total


class ComplianceScorer:
    """
    Compliance scorer compiled for a fixed team list and comparison set.

    Teams are mapped to dense indices once so that a candidate ordering can be
    scored as a numpy level vector without touching Comparison objects again.
    """

    def __init__(self, comparisons: Iterable[Comparison], teams: Sequence[int]):
        self.teams: list[int] = list(teams)
        self.index: dict[int, int] = {team: i for i, team in enumerate(self.teams)}

        better_idx = list[int]()
        worse_idx = list[int]()
        for comparison in comparisons:
            if comparison.is_tie:
                continue
            better = comparison.better_team
            worse = comparison.worse_team
            if better not in self.index or worse not in self.index:
                raise ValidationError(f"Comparison {comparison} references a team outside the team list")
            better_idx.append(self.index[better])  # type: ignore[index]
            worse_idx.append(self.index[worse])  # type: ignore[index]

        self.better_idx: np.ndarray = np.asarray(better_idx, dtype=np.intp)
        self.worse_idx: np.ndarray = np.asarray(worse_idx, dtype=np.intp)

    @property
    def constraint_count(self) -> int:
        return int(self.better_idx.size)

    def score_levels(self, levels: np.ndarray) -> float:
        """Score a level vector aligned with ``self.teams``."""
        if self.better_idx.size == 0:
            return 100.0
        satisfied = np.count_nonzero(levels[self.better_idx] > levels[self.worse_idx])
        return 100.0 * satisfied / self.better_idx.size

    def score_tree(self, tree: "RankingTree") -> float:
        return self.score_levels(self.levels_of(tree))

    def levels_of(self, tree: "RankingTree") -> np.ndarray:
        """Level vector of ``tree``, which must contain every scored team."""
        levels = tree.levels
        return np.fromiter((levels[team] for team in self.teams), dtype=np.int64, count=len(self.teams))
