"""
Ranking strategy implementations.

Provides implementations of the RankingStrategy interface that turn a clean
comparison set into a best-first team order.

Available implementations:
- PointTallyStrategy: +1/-1 per judgment, cheap deterministic baseline
- RandomizedSearchStrategy: Monte Carlo permutation search with rank averaging
- GreedyInsertionStrategy: incremental tree building with local repair walks
- HeadToHeadStrategy: adjacent-swap repair on top of any other strategy
"""

from .greedy_insertion import GreedyInsertionConfig, GreedyInsertionStrategy, rank_by_greedy_insertion
from .head_to_head import HeadToHeadStrategy, rank_by_head_to_head, repair_head_to_head
from .point_tally import PointTallyStrategy, rank_by_point_tally, tally_points
from .randomized_search import RandomizedSearchConfig, RandomizedSearchStrategy, rank_by_randomized_search

__all__ = [
    "GreedyInsertionConfig",
    "GreedyInsertionStrategy",
    "HeadToHeadStrategy",
    "PointTallyStrategy",
    "RandomizedSearchConfig",
    "RandomizedSearchStrategy",
    "rank_by_greedy_insertion",
    "rank_by_head_to_head",
    "rank_by_point_tally",
    "rank_by_randomized_search",
    "repair_head_to_head",
    "tally_points",
]
