"""
Core dataclasses for the picklist ranker.

Defines the Comparison judgment (with its tagged Better/Tie outcome) and the
RankingResult handed to reporting collaborators.
"""

import time
from dataclasses import dataclass, field
from typing import Union

from .exceptions import ValidationError

# Wire-format sentinel for "no team" / tie. Never used outside (de)serialization.
NO_TEAM = 0


@dataclass(frozen=True)
class Better:
    """Outcome where one member of the pair was judged better."""

    team: int


@dataclass(frozen=True)
class Tie:
    """Outcome where both teams were judged equal."""


Outcome = Union[Better, Tie]


@dataclass(frozen=True, eq=False)
class Comparison:
    """
    A single pairwise judgment between two teams.

    Immutable value object. Two comparisons are equal when they describe the
    same judgment on the same unordered pair, regardless of which team was
    recorded as ``team_a``.
    """

    team_a: int
    team_b: int
    outcome: Outcome

    def __post_init__(self) -> None:
        """Validate comparison data."""
        for team in (self.team_a, self.team_b):
            if isinstance(team, bool) or not isinstance(team, int) or team <= 0:
                raise ValidationError(f"team numbers must be positive integers, got {team!r}")
        if self.team_a == self.team_b:
            raise ValidationError(f"a team cannot be compared with itself: {self.team_a}")
        if isinstance(self.outcome, Better):
            if self.outcome.team not in (self.team_a, self.team_b):
                raise ValidationError(
                    f"better team {self.outcome.team} is not part of pair ({self.team_a}, {self.team_b})"
                )
        elif not isinstance(self.outcome, Tie):
            raise ValidationError(f"outcome must be Better or Tie, got {self.outcome!r}")

    @classmethod
    def from_record(cls, team_a: int, team_b: int, better_team: int) -> "Comparison":
        """Build a comparison from its serialized form, where 0 marks a tie."""
        if better_team == NO_TEAM:
            return cls(team_a, team_b, Tie())
        return cls(team_a, team_b, Better(better_team))

    def to_record(self) -> dict[str, int]:
        """Serialize to the numeric-sentinel record form."""
        return {
            "team_a": self.team_a,
            "team_b": self.team_b,
            "better_team": self.better_team if self.better_team is not None else NO_TEAM,
        }

    @property
    def lower_team(self) -> int:
        return min(self.team_a, self.team_b)

    @property
    def higher_team(self) -> int:
        return max(self.team_a, self.team_b)

    @property
    def pair(self) -> tuple[int, int]:
        """Canonical (lower, higher) key of the unordered pair."""
        return (self.lower_team, self.higher_team)

    @property
    def is_tie(self) -> bool:
        return isinstance(self.outcome, Tie)

    @property
    def better_team(self) -> int | None:
        if isinstance(self.outcome, Better):
            return self.outcome.team
        return None

    @property
    def worse_team(self) -> int | None:
        better = self.better_team
        if better is None:
            return None
        return self.team_b if better == self.team_a else self.team_a

    def contains(self, team: int) -> bool:
        return team in (self.team_a, self.team_b)

    def other(self, team: int) -> int:
        """Return the member of the pair that is not ``team``."""
        if team == self.team_a:
            return self.team_b
        if team == self.team_b:
            return self.team_a
        raise KeyError(f"Team {team} is not part of comparison {self.pair}")

    def contradicts(self, other: "Comparison") -> bool:
        """True if both judge the same pair with opposite non-tie outcomes."""
        if self.pair != other.pair or self.is_tie or other.is_tie:
            return False
        return self.better_team != other.better_team

    def _key(self) -> tuple[int, int, int]:
        better = self.better_team
        return (self.lower_team, self.higher_team, better if better is not None else NO_TEAM)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Comparison):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        if self.is_tie:
            return f"{self.team_a}={self.team_b}"
        return f"{self.better_team}>{self.worse_team}"


@dataclass
class RankingResult:
    """Result of one ranking strategy run."""

    strategy: str
    ordered_teams: list[int]
    compliance_percent: float
    complete: bool = True
    levels: dict[int, int] = field(default_factory=dict)
    scores: dict[int, float] | None = None
    iterations: int = 0
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate ranking result data."""
        if not self.strategy:
            raise ValidationError("strategy cannot be empty")
        if not 0.0 <= self.compliance_percent <= 100.0:
            raise ValidationError(
                f"compliance_percent must be within [0, 100], got {self.compliance_percent}"
            )
        if len(set(self.ordered_teams)) != len(self.ordered_teams):
            raise ValidationError("ordered_teams cannot contain duplicates")
