"""
Picklist Ranker - Pairwise Comparison Ranking Engine

Orders scouted teams from noisy "A is better than B" judgments. Several
strategies (point tally, randomized permutation search, greedy insertion with
local repair, head-to-head repair) are scored by the share of judgments their
order satisfies.
"""

from .exceptions import ConfigurationError, TreeInvariantError, ValidationError
from .interfaces import ComparisonSource, RankingStrategy, Storage
from .models import Better, Comparison, RankingResult, Tie
from .orchestrator import Orchestrator, RunConfig
from .ranking_tree import RankingTree
from .resolver import ResolvedComparisons, resolve_contradictions

__version__ = "0.1.0"
__all__ = [
    "Better",
    "Comparison",
    "ComparisonSource",
    "ConfigurationError",
    "Orchestrator",
    "RankingResult",
    "RankingStrategy",
    "RankingTree",
    "ResolvedComparisons",
    "RunConfig",
    "Storage",
    "Tie",
    "TreeInvariantError",
    "ValidationError",
    "resolve_contradictions",
]
