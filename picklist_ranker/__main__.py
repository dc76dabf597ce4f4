"""
CLI entry point for the picklist ranker.

Parses arguments, validates config, wires components and prints one table
per ranking strategy.
"""

import argparse
import sys
from argparse import Namespace
from pathlib import Path
from typing import TypedDict

from prettytable import PrettyTable

from .exceptions import ConfigurationError
from .interfaces import ComparisonSource
from .logging_config import get_logger, setup_logging
from .models import RankingResult
from .orchestrator import STRATEGY_NAMES, Orchestrator, RunConfig
from .sources import JSONLComparisonSource, SimulatedComparisonSource
from .storage import JSONLStorage
from .strategies import GreedyInsertionConfig, RandomizedSearchConfig


class CLIArgs(TypedDict):
    """Typed representation of parsed CLI arguments."""
    comparisons: str | None
    teams: str | None
    simulate_teams: int | None
    simulate_matches: int
    noise: float
    output_dir: str
    strategies: list[str]
    seed: int | None
    rounds: int
    trials: int
    search_workers: int
    max_attempts: int
    workers: int
    debug: bool
    log_level: str
    log_components: list[str] | None


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Picklist Ranker - order teams from pairwise scouting judgments"
    )

    # Input, one of the two
    input_group = parser.add_mutually_exclusive_group(required=True)
    _ = input_group.add_argument(
        "--comparisons",
        help="JSONL file with one {team_a, team_b, better_team} record per line"
    )
    _ = input_group.add_argument(
        "--simulate-teams",
        type=int,
        help="Generate simulated judgments for teams 1..N instead of reading a file"
    )
    _ = parser.add_argument(
        "--teams",
        help="JSON list of known team numbers (default: teams named by comparisons)"
    )
    _ = parser.add_argument(
        "--simulate-matches",
        type=int,
        default=200,
        help="Number of simulated judgments (default: 200)"
    )
    _ = parser.add_argument(
        "--noise",
        type=float,
        default=0.1,
        help="Noise level for simulated judgments (0-1, default: 0.1)"
    )
    _ = parser.add_argument(
        "--output-dir",
        required=True,
        help="Directory for JSONL/snapshots output"
    )

    # Strategy selection and tuning
    _ = parser.add_argument(
        "--strategies",
        nargs="+",
        choices=list(STRATEGY_NAMES),
        default=list(STRATEGY_NAMES),
        help="Strategies to run (default: all)"
    )
    _ = parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for simulation and randomized search"
    )
    _ = parser.add_argument(
        "--rounds",
        type=int,
        default=100,
        help="Randomized search rounds (default: 100)"
    )
    _ = parser.add_argument(
        "--trials",
        type=int,
        default=1000,
        help="Randomized search trials per round (default: 1000)"
    )
    _ = parser.add_argument(
        "--search-workers",
        type=int,
        default=1,
        help="Worker threads for randomized search trials (default: 1)"
    )
    _ = parser.add_argument(
        "--max-attempts",
        type=int,
        default=10_000,
        help="Greedy insertion attempt budget (default: 10000)"
    )
    _ = parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Number of strategies run in parallel (default: 4)"
    )
    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set logging level (default: INFO)"
    )
    _ = parser.add_argument(
        "--log-components",
        nargs="+",
        metavar="COMPONENT",
        help="Only show console logs from these components, e.g. orchestrator randomized_search"
    )

    return parser.parse_args(argv)


def args_to_typed(ns: Namespace) -> CLIArgs:
    """Convert argparse Namespace to typed CLIArgs."""
    return CLIArgs(
        comparisons=ns.comparisons,
        teams=ns.teams,
        simulate_teams=ns.simulate_teams,
        simulate_matches=ns.simulate_matches,
        noise=ns.noise,
        output_dir=ns.output_dir,
        strategies=ns.strategies,
        seed=ns.seed,
        rounds=ns.rounds,
        trials=ns.trials,
        search_workers=ns.search_workers,
        max_attempts=ns.max_attempts,
        workers=ns.workers,
        debug=ns.debug,
        log_level=ns.log_level,
        log_components=ns.log_components,
    )


def wire_components(args: CLIArgs) -> tuple[ComparisonSource, JSONLStorage, RunConfig]:
    """Wire dependency injection components."""
    logger = get_logger("wire_components")

    # Create source
    if args["comparisons"] is not None:
        logger.info(f"Reading comparisons from {args['comparisons']}")
        teams_path = Path(args["teams"]) if args["teams"] else None
        source: ComparisonSource = JSONLComparisonSource(Path(args["comparisons"]), teams_path)
    else:
        assert args["simulate_teams"] is not None
        logger.info(f"Simulating {args['simulate_matches']} judgments over {args['simulate_teams']} teams")
        source = SimulatedComparisonSource.with_linear_strengths(
            args["simulate_teams"],
            matches=args["simulate_matches"],
            noise=args["noise"],
            seed=args["seed"],
        )

    # Create storage
    output_dir = Path(args["output_dir"])
    output_dir.mkdir(parents=True, exist_ok=True)
    storage = JSONLStorage(output_dir / "results.jsonl", output_dir / "latest_snapshot.json")

    # Build configuration
    config = RunConfig(
        strategies=args["strategies"],
        max_workers=args["workers"],
        randomized=RandomizedSearchConfig(
            seed=args["seed"],
            rounds=args["rounds"],
            trials_per_round=args["trials"],
            workers=args["search_workers"],
        ),
        greedy=GreedyInsertionConfig(max_attempts=args["max_attempts"]),
    )
    logger.info(f"Configuration: {config}")

    return source, storage, config


def render_result(result: RankingResult) -> PrettyTable:
    """Build the table for one strategy's ranking."""
    table = PrettyTable()
    table.title = (
        f"{result.strategy}: {result.compliance_percent:.2f}% compliance"
        f"{'' if result.complete else ' (incomplete)'}"
    )
    table.field_names = ["Rank", "Team", "Level", "Score"]
    table.align["Rank"] = "r"
    table.align["Team"] = "r"
    table.align["Level"] = "r"
    table.align["Score"] = "r"

    for i, team in enumerate(result.ordered_teams, 1):
        score = result.scores.get(team) if result.scores is not None else None
        table.add_row([
            i,
            team,
            result.levels.get(team, ""),
            f"{score:.3f}" if score is not None else "",
        ])
    return table


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = args_to_typed(parse_args(argv))

    # Setup logging
    setup_logging(
        level=args["log_level"],
        debug=args["debug"],
        log_dir=args["output_dir"],
        components=args["log_components"],
    )
    logger = get_logger("main")
    logger.info("Starting Picklist Ranker")

    try:
        source, storage, config = wire_components(args)
        orchestrator = Orchestrator(source, storage, config)
        results = orchestrator.run()
    except (ConfigurationError, FileNotFoundError, IsADirectoryError) as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Ranking interrupted by user")
        print("\nRanking interrupted by user")
        sys.exit(1)

    for result in results.values():
        print(render_result(result))
        print()

    for name, exc_type, message in orchestrator.failure_log:
        print(f"Strategy {name} failed: {exc_type}: {message}")

    logger.info("Ranking completed successfully")


if __name__ == "__main__":
    main()
