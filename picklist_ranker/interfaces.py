"""
Abstract base classes defining the interfaces for the picklist ranker.

All interfaces are synchronous; concurrency is layered on top with thread pools.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from typing_extensions import NotRequired, TypedDict

from .models import Comparison, RankingResult
from .resolver import ResolvedComparisons


class ComparisonRecord(TypedDict):
    """Serialized comparison; ``better_team`` is 0 for a tie."""
    team_a: int
    team_b: int
    better_team: int


class RankingResultRecord(TypedDict):
    """Serialized ranking result."""
    strategy: str
    ordered_teams: list[int]
    compliance_percent: float
    complete: bool
    levels: dict[str, int]  # JSON object keys are strings
    scores: NotRequired[dict[str, float] | None]
    iterations: int
    timestamp: float


class RunSnapshot(TypedDict):
    """Summary of one orchestrated run."""
    results: dict[str, RankingResultRecord]
    runtime_state: dict[str, int]  # comparison counts, failures, etc.


class ComparisonSource(ABC):
    """Interface for the ingestion collaborator that supplies judgments."""

    rejected_count: int = 0  # records dropped as malformed while reading

    @abstractmethod
    def list_teams(self) -> Sequence[int]:
        """Return every known team number."""
        pass

    @abstractmethod
    def list_comparisons(self) -> Iterable[Comparison]:
        """Return all raw comparisons (may contain ties, duplicates and contradictions)."""
        pass


class RankingStrategy(ABC):
    """Interface for algorithms that order teams from a clean comparison set."""

    name: str = "strategy"

    @abstractmethod
    def rank(self, resolved: ResolvedComparisons, teams: Sequence[int]) -> RankingResult:
        """
        Produce a best-first order of ``teams``.

        Args:
            resolved: Clean comparison set and lookup index
            teams: Every team to be ranked

        Returns:
            RankingResult with the achieved compliance percent
        """
        pass


class Storage(ABC):
    """Interface for persisting ranking results and run snapshots."""

    @abstractmethod
    def persist_result(self, result: RankingResult) -> None:
        """Persist one ranking result."""
        pass

    @abstractmethod
    def load_results(self) -> Iterable[RankingResult]:
        """Load all persisted ranking results."""
        pass

    @abstractmethod
    def save_snapshot(self, state: RunSnapshot) -> None:
        """Save a run snapshot."""
        pass

    @abstractmethod
    def load_snapshot(self) -> RunSnapshot | None:
        """Load the latest run snapshot."""
        pass
