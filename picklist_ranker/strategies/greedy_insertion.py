"""
Greedy insertion with local repair.

Builds a single ranking tree outward from one team, pseudo depth-first:
every team already in the tree has its comparisons examined; a partner that
is not yet placed is inserted directly above, below or alongside it, and the
scan restarts so earlier teams are revalidated against the new shape. When
both teams are placed but the judgment is violated, two local walks are tried
from a snapshot (sink the worse team, lift the better team) and the best
intermediate tree is kept.

Greedy and non-optimal. The scan is driven by an explicit attempt budget; if
it runs out, the tree built so far is returned flagged incomplete.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from typing_extensions import override

from ..exceptions import ConfigurationError
from ..interfaces import RankingStrategy
from ..logging_config import get_logger
from ..models import Comparison, RankingResult
from ..ranking_tree import RankingTree
from ..resolver import ResolvedComparisons, ensure_known_teams
from .head_to_head import repair_head_to_head

# Module-level logger
logger = get_logger("greedy_insertion")


@dataclass
class GreedyInsertionConfig:
    """Configuration for greedy insertion."""

    max_attempts: int = 10_000  # insertions + repairs
    start_team: int | None = None  # defaults to the first team in the list
    refine_with_head_to_head: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if self.max_attempts <= 0:
            raise ConfigurationError(f"max_attempts must be positive, got {self.max_attempts}")


class GreedyInsertionStrategy(RankingStrategy):
    """Incremental tree construction with demote/promote repair walks."""

    name = "greedy_insertion"

    def __init__(self, config: GreedyInsertionConfig | None = None):
        self.config: GreedyInsertionConfig = config or GreedyInsertionConfig()

    @override
    def rank(self, resolved: ResolvedComparisons, teams: Sequence[int]) -> RankingResult:
        order = self._scan_order(teams)
        if not order:
            return RankingResult(strategy=self.name, ordered_teams=[], compliance_percent=100.0)
        ensure_known_teams(resolved, order)

        tree = RankingTree()
        tree.add_node(order[0])

        # Comparisons met so far; repairs are judged against these only
        met = list[Comparison]()
        met_set = set[Comparison]()
        attempts = 0
        complete = True

        i = 0
        while i < len(order):
            team = order[i]
            if team not in tree:
                i += 1
                continue

            inserted = False
            for comparison in resolved.comparisons_for(team):
                if comparison not in met_set:
                    met_set.add(comparison)
                    met.append(comparison)

                other = comparison.other(team)
                needs_insert = other not in tree
                if not needs_insert and tree.is_comparison_compliant(comparison):
                    continue

                if attempts >= self.config.max_attempts:
                    complete = False
                    break
                attempts += 1

                if needs_insert:
                    self._insert(tree, comparison, team, other)
                    inserted = True
                else:
                    tree = self._repair(tree, comparison, met)

            if not complete:
                logger.warning(
                    f"Greedy insertion hit its budget of {self.config.max_attempts} attempts "
                    f"with {len(tree)}/{len(order)} teams placed"
                )
                break

            if inserted:
                i = 0
                continue

            i += 1
            if i == len(order):
                # Scan settled; seed the next disconnected component, if any
                seed = next((t for t in order if t not in tree), None)
                if seed is not None:
                    tree.add_node_alongside(seed, tree.to_ordered_list()[-1])
                    logger.debug(f"Seeding disconnected team {seed} at level 0")
                    i = 0

        # Teams never reached before the budget ran out sit at the bottom
        for team in order:
            if team not in tree:
                tree.add_node_alongside(team, tree.to_ordered_list()[-1])

        if self.config.refine_with_head_to_head:
            refined, _, _ = repair_head_to_head(tree.to_ordered_list(), resolved.lookup)
            tree = RankingTree.from_ordered_list(refined)

        compliance = tree.get_compliance_percent(resolved.comparisons)
        logger.info(
            f"Greedy insertion placed {len(tree)} teams on {tree.max_level + 1} levels: "
            f"{compliance:.1f}% compliance after {attempts} attempts"
        )
        return RankingResult(
            strategy=self.name,
            ordered_teams=tree.to_ordered_list(),
            compliance_percent=compliance,
            complete=complete,
            levels=tree.levels,
            iterations=attempts,
        )

    def _scan_order(self, teams: Sequence[int]) -> list[int]:
        order = list(teams)
        start = self.config.start_team
        if start is not None:
            if start not in order:
                raise ConfigurationError(f"start_team {start} is not among the ranked teams")
            order.remove(start)
            order.insert(0, start)
        return order

    @staticmethod
    def _insert(tree: RankingTree, comparison: Comparison, team: int, other: int) -> None:
        if comparison.is_tie:
            tree.add_node_alongside(other, team)
        elif comparison.better_team == team:
            tree.add_node_below(other, team)
        else:
            tree.add_node_above(other, team)
        logger.debug(f"Inserted {other} relative to {team} for {comparison}")

    @staticmethod
    def _repair(tree: RankingTree, comparison: Comparison, met: list[Comparison]) -> RankingTree:
        """
        Try both local walks from a snapshot and return the best tree seen.

        Walk one demotes the worse team toward level 0; walk two promotes the
        better team toward the top. The snapshot is kept unless some
        intermediate step strictly improves compliance.
        """
        better = comparison.better_team
        worse = comparison.worse_team
        assert better is not None and worse is not None, "ties are never repaired"

        snapshot = tree.clone()
        best_tree = snapshot
        best_compliance = snapshot.get_compliance_percent(met)
        start_compliance = best_compliance

        walk = snapshot.clone()
        while walk.get_level(worse) > 0:
            walk.demote(worse)
            compliance = walk.get_compliance_percent(met)
            if compliance > best_compliance:
                best_compliance, best_tree = compliance, walk.clone()

        # A lone team's level closes as it leaves, so a promotion can land it
        # back on the same level number; cap the walk by tree size
        walk = snapshot.clone()
        steps = 0
        while walk.get_level(better) < walk.max_level and steps <= 2 * len(walk):
            walk.promote(better)
            steps += 1
            compliance = walk.get_compliance_percent(met)
            if compliance > best_compliance:
                best_compliance, best_tree = compliance, walk.clone()

        logger.debug(f"Repair of {comparison}: {start_compliance:.1f}% -> {best_compliance:.1f}%")
        return best_tree


def rank_by_greedy_insertion(
    resolved: ResolvedComparisons,
    teams: Sequence[int],
    config: GreedyInsertionConfig | None = None,
) -> RankingResult:
    """Rank ``teams`` by greedy insertion with local repair."""
    return GreedyInsertionStrategy(config).rank(resolved, teams)
