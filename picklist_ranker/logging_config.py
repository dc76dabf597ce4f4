"""
Logging configuration for the picklist ranker.

Sets up loguru with appropriate levels and formatting. Every record carries the
component it was logged from (``resolver``, ``randomized_search``,
``orchestrator``...), so a long search can be followed one strategy at a time.
"""

import sys
from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

DEFAULT_COMPONENT = "picklist_ranker"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[component]: <18}</magenta> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]: <18} | {name}:{function}:{line} - {message}"


def component_filter(components: Iterable[str] | None) -> Callable[[dict[str, Any]], bool] | None:
    """
    Build a loguru filter passing only records from the given components.

    Args:
        components: Component names as passed to ``get_logger``; None or empty keeps everything

    Returns:
        Filter callable, or None for no filtering
    """
    if not components:
        return None
    allowed = frozenset(components)

    def _filter(record: dict[str, Any]) -> bool:
        return record["extra"].get("component", DEFAULT_COMPONENT) in allowed

    return _filter


def setup_logging(
    level: str = "INFO",
    debug: bool = False,
    log_dir: str = ".",
    components: Iterable[str] | None = None,
) -> None:
    """
    Configure loguru logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: If True, enable debug logging and more verbose output
        log_dir: Directory that receives the rotating log files
        components: Restrict console output to these components; files keep everything
    """
    # Remove default handler
    logger.remove()
    logger.configure(extra={"component": DEFAULT_COMPONENT})

    log_level = "DEBUG" if debug else level

    logger.add(
        sys.stderr,
        level=log_level,
        format=CONSOLE_FORMAT,
        filter=component_filter(components),
    )

    # File handler for important events (INFO and above)
    logger.add(
        f"{log_dir}/picklist_ranker.log",
        level="INFO",
        format=FILE_FORMAT,
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )

    if debug:
        # Per-round and per-repair detail
        logger.add(
            f"{log_dir}/picklist_ranker_debug.log",
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="50 MB",
            retention="3 days",
            compression="zip",
        )


def get_logger(name: str | None = None) -> Any:
    """
    Get a logger instance.

    Args:
        name: Component name for the logger (defaults to "picklist_ranker")

    Returns:
        Logger instance
    """
    return logger.bind(component=name or DEFAULT_COMPONENT)
