"""
Randomized ("bogo") search strategy.

Monte Carlo heuristic for the NP-hard problem of ordering teams so that as
many judgments as possible hold (a minimum feedback-arc-set analog):

1. draw uniformly random best-first permutations of the teams,
2. give every team its own level in permutation order and score the result,
3. keep the best-scoring tree seen anywhere,
4. fold the rank positions of "good" trials (compliance above an adaptive
   threshold) into a running average that is itself turned into a candidate
   tree after every round.

Repeated runs with different seeds may disagree on exact orders while
agreeing on the top and bottom tiers. The achieved compliance is reported,
never claimed optimal.
"""

import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import reduce

import numpy as np
from typing_extensions import override

from ..compliance import ComplianceScorer
from ..exceptions import ConfigurationError
from ..interfaces import RankingStrategy
from ..logging_config import get_logger
from ..models import RankingResult
from ..ranking_tree import RankingTree
from ..resolver import ResolvedComparisons

# Module-level logger
logger = get_logger("randomized_search")


@dataclass
class RandomizedSearchConfig:
    """
    Configuration for the randomized search.

    Running every configured round counts as normal completion even when
    ``target_compliance`` was never reached; only an exhausted
    ``time_budget_seconds`` flags the result incomplete.
    """

    seed: int | None = None  # None draws fresh OS entropy
    rounds: int = 100
    trials_per_round: int = 1000
    # good threshold = base * decay ** team_count, tuned empirically on ~60-team events
    good_threshold_base: float = 98.8
    good_threshold_decay: float = 0.988
    workers: int = 1  # parallel trial batches per round
    target_compliance: float = 100.0  # stop early once reached
    time_budget_seconds: float | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.rounds <= 0:
            raise ConfigurationError(f"rounds must be positive, got {self.rounds}")
        if self.trials_per_round <= 0:
            raise ConfigurationError(f"trials_per_round must be positive, got {self.trials_per_round}")
        if self.workers <= 0:
            raise ConfigurationError(f"workers must be positive, got {self.workers}")
        if self.good_threshold_base <= 0 or not (0 < self.good_threshold_decay <= 1):
            raise ConfigurationError(
                f"invalid good threshold coefficients: base={self.good_threshold_base}, "
                f"decay={self.good_threshold_decay}"
            )
        if not (0 < self.target_compliance <= 100):
            raise ConfigurationError(f"target_compliance must be within (0, 100], got {self.target_compliance}")
        if self.time_budget_seconds is not None and self.time_budget_seconds < 0:
            raise ConfigurationError(f"time_budget_seconds cannot be negative, got {self.time_budget_seconds}")

    def good_threshold(self, team_count: int) -> float:
        """Compliance a trial must exceed to contribute to the averaged ranks."""
        return self.good_threshold_base * self.good_threshold_decay ** team_count


@dataclass
class TrialBatch:
    """Pure result of a batch of independent trials."""

    trials: int
    best_compliance: float
    best_levels: np.ndarray | None
    rank_totals: np.ndarray
    good_trials: int

    def merge(self, other: "TrialBatch") -> "TrialBatch":
        """Combine two batches; on equal compliance the earlier batch's tree wins."""
        if other.best_compliance > self.best_compliance:
            best_compliance, best_levels = other.best_compliance, other.best_levels
        else:
            best_compliance, best_levels = self.best_compliance, self.best_levels
        return TrialBatch(
            trials=self.trials + other.trials,
            best_compliance=best_compliance,
            best_levels=best_levels,
            rank_totals=self.rank_totals + other.rank_totals,
            good_trials=self.good_trials + other.good_trials,
        )


def run_trial_batch(
    scorer: ComplianceScorer,
    trials: int,
    good_threshold: float,
    seed: np.random.SeedSequence,
) -> TrialBatch:
    """
    Run ``trials`` random permutations with a private generator.

    Reads only the scorer, so batches can run on separate workers.
    """
    rng = np.random.default_rng(seed)
    team_count = len(scorer.teams)
    # best-first position j gets level n-1-j and n-j rank points
    descending = np.arange(team_count - 1, -1, -1, dtype=np.int64)

    best_compliance = -1.0
    best_levels: np.ndarray | None = None
    rank_totals = np.zeros(team_count, dtype=np.float64)
    good_trials = 0

    for _ in range(trials):
        order = rng.permutation(team_count)
        levels = np.empty(team_count, dtype=np.int64)
        levels[order] = descending
        compliance = scorer.score_levels(levels)

        if compliance > best_compliance:
            best_compliance = compliance
            best_levels = levels

        if compliance > good_threshold:
            rank_totals += levels + 1
            good_trials += 1

    return TrialBatch(
        trials=trials,
        best_compliance=best_compliance,
        best_levels=best_levels,
        rank_totals=rank_totals,
        good_trials=good_trials,
    )


def _split(total: int, parts: int) -> list[int]:
    """Split ``total`` trials into ``parts`` near-equal non-empty batches."""
    parts = min(parts, total)
    base, extra = divmod(total, parts)
    return [base + (1 if i < extra else 0) for i in range(parts)]


class RandomizedSearchStrategy(RankingStrategy):
    """Monte Carlo search over team permutations with rank averaging."""

    name = "randomized_search"

    def __init__(self, config: RandomizedSearchConfig | None = None):
        self.config: RandomizedSearchConfig = config or RandomizedSearchConfig()

    @override
    def rank(self, resolved: ResolvedComparisons, teams: Sequence[int]) -> RankingResult:
        config = self.config
        teams = list(teams)
        if not teams:
            return RankingResult(strategy=self.name, ordered_teams=[], compliance_percent=100.0)

        scorer = ComplianceScorer(resolved.comparisons, teams)
        threshold = config.good_threshold(len(teams))
        batch_sizes = _split(config.trials_per_round, config.workers)
        root_seed = np.random.SeedSequence(config.seed)
        deadline = None
        if config.time_budget_seconds is not None:
            deadline = time.monotonic() + config.time_budget_seconds

        best_tree = RankingTree.from_ordered_list(teams)
        best_compliance = scorer.score_tree(best_tree)
        cumulative_ranks = np.zeros(len(teams), dtype=np.float64)
        trials_run = 0
        complete = True

        logger.info(
            f"Randomized search over {len(teams)} teams, {scorer.constraint_count} comparisons: "
            f"{config.rounds} rounds x {config.trials_per_round} trials, good threshold {threshold:.2f}%"
        )

        with ThreadPoolExecutor(max_workers=len(batch_sizes)) as executor:
            for round_index in range(config.rounds):
                if best_compliance >= config.target_compliance:
                    logger.info(f"Target compliance reached after {round_index} rounds")
                    break
                if deadline is not None and time.monotonic() >= deadline:
                    logger.warning(
                        f"Time budget exhausted after {round_index}/{config.rounds} rounds; "
                        f"returning best tree at {best_compliance:.1f}%"
                    )
                    complete = False
                    break

                seeds = root_seed.spawn(len(batch_sizes))
                futures = [
                    executor.submit(run_trial_batch, scorer, size, threshold, seed)
                    for size, seed in zip(batch_sizes, seeds)
                ]
                # Fold in submission order
                merged = reduce(TrialBatch.merge, (future.result() for future in futures))
                trials_run += merged.trials

                if merged.best_compliance > best_compliance and merged.best_levels is not None:
                    best_compliance = merged.best_compliance
                    best_tree = RankingTree.from_level_map(
                        {team: int(level) for team, level in zip(teams, merged.best_levels)}
                    )

                if merged.good_trials:
                    cumulative_ranks += merged.rank_totals / merged.good_trials
                    averaged_tree = RankingTree.from_scores(
                        {team: float(rank) for team, rank in zip(teams, cumulative_ranks)}
                    )
                    averaged_compliance = scorer.score_tree(averaged_tree)
                    if averaged_compliance > best_compliance:
                        best_compliance = averaged_compliance
                        best_tree = averaged_tree

                logger.debug(
                    f"Round {round_index + 1}: batch best {merged.best_compliance:.1f}%, "
                    f"{merged.good_trials} good trials, global best {best_compliance:.1f}%"
                )

        logger.info(f"Randomized search finished: {best_compliance:.1f}% after {trials_run} trials")
        return RankingResult(
            strategy=self.name,
            ordered_teams=best_tree.to_ordered_list(),
            compliance_percent=best_compliance,
            complete=complete,
            levels=best_tree.levels,
            iterations=trials_run,
        )


def rank_by_randomized_search(
    resolved: ResolvedComparisons,
    teams: Sequence[int],
    config: RandomizedSearchConfig | None = None,
) -> RankingResult:
    """Rank ``teams`` by randomized permutation search."""
    return RandomizedSearchStrategy(config).rank(resolved, teams)
