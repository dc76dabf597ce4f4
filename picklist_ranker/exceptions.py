"""
Exception classes for the picklist ranker.

Centralized location for all custom exceptions to avoid circular imports.
"""


class ValidationError(Exception):
    """Raised for malformed comparisons or records that reference unknown teams."""
    pass


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""
    pass


class TreeInvariantError(Exception):
    """
    Raised when a ranking tree's levels stop forming a contiguous range.

    Indicates a bug in a tree mutator, never a data problem.
    """
    pass
