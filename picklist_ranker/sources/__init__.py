"""
Comparison source implementations.

Provides implementations of the ComparisonSource interface that supply raw
pairwise judgments and the known team set.

Available implementations:
- JSONLComparisonSource: Loads judgments from a JSONL file (optional teams list)
- SimulatedComparisonSource: Generates noisy judgments from latent strengths
"""

from .jsonl_source import JSONLComparisonSource
from .simulated_source import SimulatedComparisonSource

__all__ = ["JSONLComparisonSource", "SimulatedComparisonSource"]
