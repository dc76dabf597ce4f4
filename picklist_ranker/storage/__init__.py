"""
Storage implementations.

Provides implementations of the Storage interface for persisting ranking
results and run snapshots.

Available implementations:
- JSONLStorage: Persists results to JSONL files and snapshots to JSON
"""

from .jsonl_storage import JSONLStorage

__all__ = ["JSONLStorage"]
