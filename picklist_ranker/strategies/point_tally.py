"""
Point tally strategy.

Baseline ranking: +1 to the better team and -1 to the worse team for every
judgment. Cheap and deterministic, but it rewards how often a team was paired
favourably rather than absolute strength (a team that keeps playing next to
stronger partners is under-rated). Not meant for serious analysis.
"""

from collections.abc import Iterable, Sequence

from typing_extensions import override

from ..interfaces import RankingStrategy
from ..logging_config import get_logger
from ..models import Comparison, RankingResult
from ..ranking_tree import RankingTree
from ..resolver import ResolvedComparisons, ensure_known_teams

# Module-level logger
logger = get_logger("point_tally")


def tally_points(comparisons: Iterable[Comparison], teams: Iterable[int] = ()) -> dict[int, int]:
    """Net wins per team. Teams listed in ``teams`` start at zero; ties score nothing."""
    scores = {team: 0 for team in teams}
    for comparison in comparisons:
        if comparison.is_tie:
            continue
        better = comparison.better_team
        worse = comparison.worse_team
        scores[better] = scores.get(better, 0) + 1  # type: ignore[index,arg-type]
        scores[worse] = scores.get(worse, 0) - 1  # type: ignore[index,arg-type]
    return scores


class PointTallyStrategy(RankingStrategy):
    """Orders teams by descending tally, ties broken by ascending team number."""

    name = "point_tally"

    @override
    def rank(self, resolved: ResolvedComparisons, teams: Sequence[int]) -> RankingResult:
        if not teams:
            return RankingResult(strategy=self.name, ordered_teams=[], compliance_percent=100.0, scores={})
        ensure_known_teams(resolved, teams)
        scores = tally_points(resolved.comparisons, teams)
        ordered = sorted(teams, key=lambda team: (-scores[team], team))
        tree = RankingTree.from_scores({team: scores[team] for team in teams})
        compliance = tree.get_compliance_percent(resolved.comparisons)

        logger.info(f"Point tally ranked {len(ordered)} teams at {compliance:.1f}% compliance")
        return RankingResult(
            strategy=self.name,
            ordered_teams=ordered,
            compliance_percent=compliance,
            complete=True,
            levels=tree.levels,
            scores={team: float(scores[team]) for team in ordered},
            iterations=len(resolved.comparisons),
        )


def rank_by_point_tally(resolved: ResolvedComparisons, teams: Sequence[int]) -> RankingResult:
    """Rank ``teams`` by net judgment points."""
    return PointTallyStrategy().rank(resolved, teams)
