"""
Orchestrator for picklist ranking runs.

Coordinates source, resolver, strategies and storage. Strategies run
concurrently on the shared read-only clean comparison set; results are
collected, persisted and snapshotted on the main thread.
"""

from concurrent.futures import ThreadPoolExecutor, Future, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loguru import Logger

from .exceptions import ConfigurationError
from .interfaces import ComparisonSource, RankingStrategy, RunSnapshot, Storage
from .logging_config import get_logger
from .models import RankingResult
from .resolver import ResolvedComparisons, resolve_contradictions, validate_comparisons
from .storage.jsonl_storage import result_to_record
from .strategies import (
    GreedyInsertionConfig,
    GreedyInsertionStrategy,
    HeadToHeadStrategy,
    PointTallyStrategy,
    RandomizedSearchConfig,
    RandomizedSearchStrategy,
)

STRATEGY_NAMES = ("point_tally", "randomized_search", "greedy_insertion", "head_to_head")


@dataclass
class RunConfig:
    """Configuration for a ranking run."""

    strategies: list[str] = field(default_factory=lambda: list(STRATEGY_NAMES))
    max_workers: int = 4  # thread pool size, one strategy per worker
    randomized: RandomizedSearchConfig = field(default_factory=RandomizedSearchConfig)
    greedy: GreedyInsertionConfig = field(default_factory=GreedyInsertionConfig)

    def __post_init__(self):
        """Validate configuration."""
        if not self.strategies:
            raise ConfigurationError("at least one strategy must be selected")
        unknown = [name for name in self.strategies if name not in STRATEGY_NAMES]
        if unknown:
            raise ConfigurationError(f"unknown strategies {unknown}, expected a subset of {list(STRATEGY_NAMES)}")
        if len(set(self.strategies)) != len(self.strategies):
            raise ConfigurationError(f"strategies cannot repeat, got {self.strategies}")
        if self.max_workers <= 0:
            raise ConfigurationError(f"max_workers must be positive, got {self.max_workers}")


def build_strategy(name: str, config: RunConfig) -> RankingStrategy:
    """Instantiate a strategy by name with its configuration."""
    if name == "point_tally":
        return PointTallyStrategy()
    if name == "randomized_search":
        return RandomizedSearchStrategy(config.randomized)
    if name == "greedy_insertion":
        return GreedyInsertionStrategy(config.greedy)
    if name == "head_to_head":
        return HeadToHeadStrategy(PointTallyStrategy())
    raise ConfigurationError(f"unknown strategy: {name}")


class Orchestrator:
    """Main orchestrator for a picklist ranking run."""

    def __init__(self, source: ComparisonSource, storage: Storage, config: RunConfig):
        """Initialize orchestrator with all components."""
        self.source: ComparisonSource = source
        self.storage: Storage = storage
        self.config: RunConfig = config

        # Runtime state
        self.teams = list[int]()
        self.resolved: ResolvedComparisons | None = None
        self.raw_comparisons: int = 0
        self.rejected_comparisons: int = 0
        self.source_rejected_comparisons: int = 0
        self.failure_log = list[tuple[str, str, str]]()  # (strategy, exception_type, exception_msg)

        # Setup logger
        self.logger: Logger = get_logger("orchestrator")

    def run(self) -> dict[str, RankingResult]:
        """Run every configured strategy and return results keyed by strategy name."""
        self.logger.info(f"Starting picklist ranking with config: {self.config}")

        self.teams = list(self.source.list_teams())
        raw = list(self.source.list_comparisons())
        self.source_rejected_comparisons = self.source.rejected_count
        self.raw_comparisons = len(raw)
        report = validate_comparisons(raw, self.teams)
        self.rejected_comparisons = report.rejected_count
        self.resolved = resolve_contradictions(report.accepted)
        self.logger.info(
            f"Ranking {len(self.teams)} teams from {len(self.resolved)} clean comparisons "
            f"({self.rejected_comparisons} unknown-team, {self.source_rejected_comparisons} malformed rejected)"
        )

        def rank_worker(strategy: RankingStrategy, resolved: ResolvedComparisons, teams: list[int]) -> RankingResult:
            """Pure worker function - receives data, returns result."""
            return strategy.rank(resolved, teams)

        results = dict[str, RankingResult]()
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = dict[Future[RankingResult], str]()
            for name in self.config.strategies:
                strategy = build_strategy(name, self.config)
                future = executor.submit(rank_worker, strategy, self.resolved, self.teams)
                futures[future] = name

            for future in as_completed(futures):
                name = futures[future]
                try:
                    result = future.result()
                except Exception as e:
                    self.logger.error(f"Strategy {name} failed: {type(e).__name__}: {e}")
                    self.failure_log.append((name, type(e).__name__, str(e)))
                    continue
                self.storage.persist_result(result)
                results[name] = result
                self.logger.info(
                    f"Strategy {name} finished: {result.compliance_percent:.2f}% compliance"
                    f"{'' if result.complete else ' (incomplete)'}"
                )

        if not results:
            raise RuntimeError(f"All {len(self.config.strategies)} strategies failed: {self.failure_log}")

        # Report in configured order, not completion order
        ordered = {name: results[name] for name in self.config.strategies if name in results}
        self._save_snapshot(ordered)
        self.logger.info(f"Ranking run complete: {len(ordered)} strategies succeeded, {len(self.failure_log)} failed")
        return ordered

    def _save_snapshot(self, results: dict[str, RankingResult]) -> None:
        """Save snapshot (main thread only)."""
        assert self.resolved is not None
        snapshot: RunSnapshot = {
            "results": {name: result_to_record(result) for name, result in results.items()},
            "runtime_state": {
                "teams": len(self.teams),
                "raw_comparisons": self.raw_comparisons,
                "rejected_comparisons": self.rejected_comparisons,
                "source_rejected_comparisons": self.source_rejected_comparisons,
                "clean_comparisons": len(self.resolved),
                "ties_dropped": self.resolved.ties_dropped,
                "contradictions_dropped": self.resolved.contradictions_dropped,
                "duplicates_dropped": self.resolved.duplicates_dropped,
                "failed_strategies": len(self.failure_log),
            },
        }
        self.storage.save_snapshot(snapshot)
        self.logger.debug(f"Saved snapshot with {len(results)} results")
