"""
JSONL comparison source.

Reads judgments from a JSONL file with one ``{team_a, team_b, better_team}``
record per line, plus an optional JSON list of known team numbers.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from typing_extensions import override

from ..exceptions import ValidationError
from ..interfaces import ComparisonRecord, ComparisonSource
from ..logging_config import get_logger
from ..models import Comparison

# Module-level logger
logger = get_logger("jsonl_source")

_record_adapter = TypeAdapter(ComparisonRecord)
_teams_adapter = TypeAdapter(list[int])


class JSONLComparisonSource(ComparisonSource):
    """
    Comparison source backed by a JSONL file.

    Malformed lines are skipped, logged and counted in ``rejected_count``;
    they never reach the ranking engine.
    """

    def __init__(self, comparisons_path: Path, teams_path: Path | None = None):
        """
        Initialize JSONL comparison source.

        Args:
            comparisons_path: JSONL file with one comparison record per line
            teams_path: Optional JSON file holding the list of known team numbers.
                        Without it, the known teams are those named by comparisons.
        """
        self.comparisons_path: Path = Path(comparisons_path)
        self.teams_path: Path | None = Path(teams_path) if teams_path is not None else None

        if not self.comparisons_path.exists():
            raise FileNotFoundError(f"Comparisons file does not exist: {self.comparisons_path}")
        if self.comparisons_path.is_dir():
            raise IsADirectoryError(f"Comparisons path is a directory: {self.comparisons_path}")
        if self.teams_path is not None and not self.teams_path.exists():
            raise FileNotFoundError(f"Teams file does not exist: {self.teams_path}")

        # Cache for loaded data
        self._comparisons = list[Comparison]()
        self._teams = list[int]()
        self._loaded: bool = False
        self.rejected_count: int = 0

    def _load(self) -> None:
        """Load comparisons (and teams) into the cache."""
        if self._loaded:
            return

        with open(self.comparisons_path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = _record_adapter.validate_json(line)
                    comparison = Comparison.from_record(
                        record["team_a"], record["team_b"], record["better_team"]
                    )
                except (PydanticValidationError, ValidationError) as e:
                    self.rejected_count += 1
                    logger.warning(f"Skipping invalid comparison on line {line_number} of {self.comparisons_path}: {e}")
                    continue
                self._comparisons.append(comparison)

        if self.teams_path is not None:
            self._teams = list(dict.fromkeys(_teams_adapter.validate_json(self.teams_path.read_bytes())))
        else:
            named = dict[int, None]()
            for comparison in self._comparisons:
                named.setdefault(comparison.team_a)
                named.setdefault(comparison.team_b)
            self._teams = sorted(named)

        self._loaded = True
        logger.info(
            f"Loaded {len(self._comparisons)} comparisons and {len(self._teams)} teams "
            f"from {self.comparisons_path} ({self.rejected_count} rejected)"
        )

    @override
    def list_teams(self) -> Sequence[int]:
        self._load()
        return list(self._teams)

    @override
    def list_comparisons(self) -> Iterable[Comparison]:
        self._load()
        return list(self._comparisons)

    def reload(self) -> None:
        """Force a re-read of the files on next access."""
        self._comparisons.clear()
        self._teams.clear()
        self.rejected_count = 0
        self._loaded = False
