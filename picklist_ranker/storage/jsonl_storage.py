"""
JSONL storage implementation.

Persists ranking results to an append-only JSONL file and run snapshots to
both a JSON file (latest) and a JSONL file (history).
"""

import json
import typing
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from typing_extensions import override

from ..exceptions import ValidationError
from ..interfaces import RankingResultRecord, RunSnapshot, Storage
from ..logging_config import get_logger
from ..models import RankingResult

# Module-level logger
logger = get_logger("jsonl_storage")

_result_adapter = TypeAdapter(RankingResultRecord)


def result_to_record(result: RankingResult) -> RankingResultRecord:
    """Convert a result to its JSON form (team keys become strings)."""
    record: RankingResultRecord = {
        "strategy": result.strategy,
        "ordered_teams": list(result.ordered_teams),
        "compliance_percent": result.compliance_percent,
        "complete": result.complete,
        "levels": {str(team): level for team, level in result.levels.items()},
        "iterations": result.iterations,
        "timestamp": result.timestamp,
    }
    if result.scores is not None:
        record["scores"] = {str(team): score for team, score in result.scores.items()}
    return record


def result_from_record(record: RankingResultRecord) -> RankingResult:
    """Rebuild a result from its JSON form."""
    scores = record.get("scores")
    return RankingResult(
        strategy=record["strategy"],
        ordered_teams=list(record["ordered_teams"]),
        compliance_percent=record["compliance_percent"],
        complete=record["complete"],
        levels={int(team): level for team, level in record["levels"].items()},
        scores={int(team): score for team, score in scores.items()} if scores is not None else None,
        iterations=record["iterations"],
        timestamp=record["timestamp"],
    )


class JSONLStorage(Storage):
    """
    JSONL-based storage implementation.

    Uses a JSONL file for results (append-only) and both a JSON file and a
    JSONL file for snapshots.
    """

    results_path: Path
    snapshot_path: Path
    snapshots_jsonl_path: Path

    def __init__(self, results_path: Path, snapshot_path: Path):
        """
        Initialize JSONL storage.

        Args:
            results_path: Path to JSONL file for ranking results
            snapshot_path: Path to JSON file for latest snapshot
        """
        self.results_path = Path(results_path)
        self.snapshot_path = Path(snapshot_path)
        # Create snapshots.jsonl path in same directory as snapshot_path
        self.snapshots_jsonl_path = self.snapshot_path.parent / "snapshots.jsonl"

        # Ensure parent directories exist
        self.results_path.parent.mkdir(parents=True, exist_ok=True)
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(
            f"JSONL storage initialized: results={self.results_path}, snapshot={self.snapshot_path}, snapshots_jsonl={self.snapshots_jsonl_path}"
        )

    @override
    def persist_result(self, result: RankingResult) -> None:
        """Append a ranking result to the results JSONL file."""
        logger.debug(f"Persisting {result.strategy} result over {len(result.ordered_teams)} teams")

        with open(self.results_path, "a", encoding="utf-8") as f:
            json.dump(result_to_record(result), f, ensure_ascii=False)
            f.write("\n")

        logger.debug(f"Successfully persisted result to {self.results_path}")

    @override
    def load_results(self) -> Iterable[RankingResult]:
        """Load all persisted ranking results, skipping corrupted lines."""
        if not self.results_path.exists():
            return

        with open(self.results_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue

                try:
                    record = _result_adapter.validate_json(line)
                    yield result_from_record(record)
                except (PydanticValidationError, ValidationError, ValueError) as e:
                    # Skip corrupted or invalid lines
                    logger.warning(f"Skipping invalid JSON line in {self.results_path}: {e}")
                    continue

    @override
    def save_snapshot(self, state: RunSnapshot) -> None:
        """Save run snapshot to both JSON and JSONL files."""
        logger.info(f"Saving snapshot of {len(state['results'])} results to {self.snapshot_path}")

        # Latest snapshot
        with open(self.snapshot_path, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2, ensure_ascii=False)

        # Historical snapshots
        with open(self.snapshots_jsonl_path, "a", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False)
            f.write("\n")

        logger.debug("Snapshot saved successfully to both JSON and JSONL files")

    @override
    def load_snapshot(self) -> RunSnapshot | None:
        """Load run snapshot from JSON."""
        if not self.snapshot_path.exists():
            logger.debug("No snapshot file exists")
            return None

        logger.info(f"Loading snapshot from {self.snapshot_path}")
        try:
            with open(self.snapshot_path, "r", encoding="utf-8") as f:
                data = typing.cast(dict[str, Any], json.load(f))  # pyright: ignore[reportExplicitAny]

            assert "results" in data, "Missing required field: results"
            assert "runtime_state" in data, "Missing required field: runtime_state"
            assert isinstance(data["results"], dict), "results must be a dictionary"
            assert isinstance(data["runtime_state"], dict), "runtime_state must be a dictionary"

            for strategy, record in typing.cast(dict[str, object], data["results"]).items():
                assert isinstance(record, dict), f"result for {strategy} must be a dictionary"
                assert "ordered_teams" in record, f"Missing required field: results.{strategy}.ordered_teams"

            logger.info("Successfully loaded snapshot with results and runtime_state")
            return typing.cast(RunSnapshot, typing.cast(object, data))

        except (json.JSONDecodeError, AssertionError) as e:
            logger.error(f"Failed to load snapshot from {self.snapshot_path}: {e}")
            return None

    def clear_results(self) -> None:
        """Clear all results (for testing)."""
        if self.results_path.exists():
            self.results_path.unlink()

    def clear_snapshot(self) -> None:
        """Clear snapshot (for testing)."""
        if self.snapshot_path.exists():
            self.snapshot_path.unlink()
        if self.snapshots_jsonl_path.exists():
            self.snapshots_jsonl_path.unlink()

    def get_result_count(self) -> int:
        """Get number of stored results."""
        if not self.results_path.exists():
            return 0

        count = 0
        with open(self.results_path, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    count += 1
        return count
