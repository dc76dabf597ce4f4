"""
Contradiction resolver.

Turns the raw judgment list into the clean comparison set every strategy
ranks against: ties removed, directly opposing judgments cancelled, duplicates
collapsed, plus a per-team lookup index.
"""

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .exceptions import ValidationError
from .logging_config import get_logger
from .models import Comparison

# Module-level logger
logger = get_logger("resolver")


@dataclass(frozen=True)
class ResolvedComparisons:
    """Clean comparison set and its read-only per-team lookup index."""

    comparisons: tuple[Comparison, ...]
    lookup: Mapping[int, tuple[Comparison, ...]]
    ties_dropped: int = 0
    contradictions_dropped: int = 0
    duplicates_dropped: int = 0

    def comparisons_for(self, team: int) -> tuple[Comparison, ...]:
        return self.lookup.get(team, ())

    def __len__(self) -> int:
        return len(self.comparisons)


@dataclass
class ValidationReport:
    """Comparisons accepted against the known team set, and those rejected."""

    accepted: list[Comparison] = field(default_factory=list)
    rejected: list[tuple[Comparison, str]] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


def validate_comparisons(comparisons: Iterable[Comparison], known_teams: Collection[int]) -> ValidationReport:
    """
    Reject comparisons that reference a team outside ``known_teams``.

    Rejected comparisons are counted and reported, never folded into scoring.
    """
    known = set(known_teams)
    report = ValidationReport()
    for comparison in comparisons:
        unknown = [team for team in (comparison.team_a, comparison.team_b) if team not in known]
        if unknown:
            reason = f"unknown team(s) {unknown}"
            logger.warning(f"Rejecting comparison {comparison}: {reason}")
            report.rejected.append((comparison, reason))
        else:
            report.accepted.append(comparison)
    if report.rejected:
        logger.info(f"Rejected {report.rejected_count} malformed comparison(s)")
    return report


def build_lookup(comparisons: Iterable[Comparison]) -> Mapping[int, tuple[Comparison, ...]]:
    """Index comparisons by each team they reference, preserving input order."""
    index = dict[int, list[Comparison]]()
    for comparison in comparisons:
        index.setdefault(comparison.team_a, []).append(comparison)
        index.setdefault(comparison.team_b, []).append(comparison)
    return MappingProxyType({team: tuple(comps) for team, comps in index.items()})


def resolve_contradictions(comparisons: Iterable[Comparison]) -> ResolvedComparisons:
    """
    Build the clean comparison set.

    Semantics are pairwise cancellation, not vote counting: a judgment is
    dropped whenever any judgment on the same pair points the other way, so
    two "A>B" against one "B>A" leave no judgment on the pair at all.
    Transitive cycles (A>B, B>C, C>A) are kept for the strategies to absorb.
    """
    snapshot = tuple(comparisons)

    ties = 0
    directions = dict[tuple[int, int], set[int]]()
    for comparison in snapshot:
        if comparison.is_tie:
            ties += 1
            continue
        directions.setdefault(comparison.pair, set()).add(comparison.better_team)  # type: ignore[arg-type]

    clean = list[Comparison]()
    seen = set[Comparison]()
    contradictions = 0
    duplicates = 0
    for comparison in snapshot:
        if comparison.is_tie:
            continue
        if len(directions[comparison.pair]) > 1:
            contradictions += 1
            logger.debug(f"Cancelling contradicted comparison {comparison}")
            continue
        if comparison in seen:
            duplicates += 1
            continue
        seen.add(comparison)
        clean.append(comparison)

    logger.info(
        f"Resolved {len(snapshot)} comparisons into {len(clean)}: "
        f"{ties} ties, {contradictions} contradicted, {duplicates} duplicates dropped"
    )
    clean_tuple = tuple(clean)
    return ResolvedComparisons(
        comparisons=clean_tuple,
        lookup=build_lookup(clean_tuple),
        ties_dropped=ties,
        contradictions_dropped=contradictions,
        duplicates_dropped=duplicates,
    )


def ensure_known_teams(resolved: ResolvedComparisons, teams: Collection[int]) -> None:
    """Raise ValidationError if the clean set references a team not being ranked."""
    known = set(teams)
    unknown = sorted(team for team in resolved.lookup if team not in known)
    if unknown:
        raise ValidationError(f"Comparisons reference teams outside the ranked set: {unknown}")
