"""
Head-to-head repair.

Takes a ranked list produced by any method and swaps adjacent teams whenever a
direct judgment says the lower-placed team is better. Essentially bubble sort
driven only by comparisons.
"""

from collections.abc import Mapping, Sequence

from typing_extensions import override

from ..interfaces import RankingStrategy
from ..logging_config import get_logger
from ..models import Comparison, RankingResult
from ..ranking_tree import RankingTree
from ..resolver import ResolvedComparisons, ensure_known_teams
from .point_tally import PointTallyStrategy

# Module-level logger
logger = get_logger("head_to_head")


def _beats(challenger: int, incumbent: int, lookup: Mapping[int, Sequence[Comparison]]) -> bool:
    return any(
        comparison.contains(challenger) and comparison.better_team == challenger
        for comparison in lookup.get(incumbent, ())
    )


def repair_head_to_head(
    ordered_teams: Sequence[int],
    lookup: Mapping[int, Sequence[Comparison]],
    max_passes: int | None = None,
) -> tuple[list[int], int, bool]:
    """
    Bubble adjacent head-to-head conflicts out of a best-first list.

    Args:
        ordered_teams: Best-first ranked list to repair
        lookup: Team -> comparisons index from the resolver
        max_passes: Upper bound on full passes (default: n^2 + 1)

    Returns:
        (repaired order, passes used, True if a pass finished without swaps)
    """
    order = list(ordered_teams)
    limit = max_passes if max_passes is not None else len(order) ** 2 + 1

    passes = 0
    while passes < limit:
        passes += 1
        swapped = False
        for i in range(len(order) - 1):
            if _beats(order[i + 1], order[i], lookup):
                order[i], order[i + 1] = order[i + 1], order[i]
                swapped = True
        if not swapped:
            return order, passes, True

    logger.warning(f"Head-to-head repair stopped after {passes} passes without settling")
    return order, passes, False


class HeadToHeadStrategy(RankingStrategy):
    """Runs a seed strategy, then repairs its order head to head."""

    name = "head_to_head"

    def __init__(self, seed_strategy: RankingStrategy | None = None, max_passes: int | None = None):
        self.seed_strategy: RankingStrategy = seed_strategy or PointTallyStrategy()
        self.max_passes = max_passes

    @override
    def rank(self, resolved: ResolvedComparisons, teams: Sequence[int]) -> RankingResult:
        if teams:
            ensure_known_teams(resolved, teams)
        seed = self.seed_strategy.rank(resolved, teams)
        order, passes, converged = repair_head_to_head(seed.ordered_teams, resolved.lookup, self.max_passes)
        tree = RankingTree.from_ordered_list(order)
        compliance = tree.get_compliance_percent(resolved.comparisons)

        logger.info(
            f"Head-to-head repair of {seed.strategy}: {seed.compliance_percent:.1f}% -> {compliance:.1f}% "
            f"in {passes} passes"
        )
        return RankingResult(
            strategy=self.name,
            ordered_teams=order,
            compliance_percent=compliance,
            complete=seed.complete and converged,
            levels=tree.levels,
            scores=seed.scores,
            iterations=passes,
        )


def rank_by_head_to_head(
    resolved: ResolvedComparisons,
    teams: Sequence[int],
    seed_strategy: RankingStrategy | None = None,
) -> RankingResult:
    """Rank ``teams`` with ``seed_strategy`` (point tally by default) and repair head to head."""
    return HeadToHeadStrategy(seed_strategy).rank(resolved, teams)
