"""
Simulated comparison source.

Samples noisy pairwise judgments from latent team strengths, for demos and
for exercising the strategies on data with a known answer.
"""

import random
from collections.abc import Iterable, Mapping, Sequence

from typing_extensions import override

from ..exceptions import ConfigurationError
from ..interfaces import ComparisonSource
from ..logging_config import get_logger
from ..models import Better, Comparison, Tie

# Module-level logger
logger = get_logger("simulated_source")


class SimulatedComparisonSource(ComparisonSource):
    """
    Simulated scouting feed.

    Each simulated match pairs two random teams; the judged winner is the team
    with the higher noisy strength, or a tie when the noisy strengths fall
    within ``tie_margin`` of each other.
    """

    def __init__(
        self,
        ground_truth: Mapping[int, float],
        matches: int = 200,
        noise: float = 0.1,
        tie_margin: float = 0.0,
        seed: int | None = None,
    ):
        """
        Initialize simulated source.

        Args:
            ground_truth: Dict mapping team number to true strength
            matches: Number of pairwise judgments to generate
            noise: Amount of noise to add (0-1, where 1 = full noise)
            tie_margin: Noisy strength gap below which a tie is recorded
            seed: Random seed for reproducible judgments
        """
        if len(ground_truth) < 2:
            raise ConfigurationError("simulation needs at least two teams")
        if matches < 0:
            raise ConfigurationError(f"matches cannot be negative, got {matches}")
        self.ground_truth = dict(ground_truth)
        self.matches = matches
        self.noise = max(0.0, min(1.0, noise))  # Clamp to [0, 1]
        self.tie_margin = max(0.0, tie_margin)
        self.seed = seed
        self._comparisons: list[Comparison] | None = None

    @classmethod
    def with_linear_strengths(cls, team_count: int, **kwargs) -> "SimulatedComparisonSource":
        """Teams 1..n where a higher team number is a stronger team."""
        return cls({team: float(team) for team in range(1, team_count + 1)}, **kwargs)

    def _add_noise(self, rng: random.Random, strength: float) -> float:
        """Add Gaussian noise scaled by strength magnitude."""
        if self.noise == 0:
            return strength
        return strength + rng.gauss(0, abs(strength) * self.noise)

    def _generate(self) -> list[Comparison]:
        rng = random.Random(self.seed)
        teams = sorted(self.ground_truth)
        comparisons = list[Comparison]()
        for _ in range(self.matches):
            team_a, team_b = rng.sample(teams, 2)
            strength_a = self._add_noise(rng, self.ground_truth[team_a])
            strength_b = self._add_noise(rng, self.ground_truth[team_b])
            if abs(strength_a - strength_b) <= self.tie_margin:
                outcome = Tie()
            else:
                outcome = Better(team_a if strength_a > strength_b else team_b)
            comparisons.append(Comparison(team_a, team_b, outcome))
        logger.info(
            f"Simulated {len(comparisons)} judgments over {len(teams)} teams (noise={self.noise})"
        )
        return comparisons

    @override
    def list_teams(self) -> Sequence[int]:
        return sorted(self.ground_truth)

    @override
    def list_comparisons(self) -> Iterable[Comparison]:
        if self._comparisons is None:
            self._comparisons = self._generate()
        return list(self._comparisons)

    def get_ground_truth_order(self) -> list[int]:
        """Best-first order by true strength, ties broken by team number."""
        return sorted(self.ground_truth, key=lambda team: (-self.ground_truth[team], team))
