"""Search over the archive and formatting of its results."""

from .formatting import (
    domain_counts,
    format_results_as_markdown,
    format_results_for_console,
    group_results_by_date,
    results_envelope,
)
from .query import SearchPredicates, has_predicates, search

__all__ = [
    "SearchPredicates",
    "domain_counts",
    "format_results_as_markdown",
    "format_results_for_console",
    "group_results_by_date",
    "has_predicates",
    "results_envelope",
    "search",
]
