"""Ingestion: validate raw OneTab exports, normalize them and merge batches."""

from .merge import count_new_groups, merge
from .normalize import normalize, parse_export, transform_group
from .stats import compute_stats, sort_newest_first
from .validate import probe_export, validate_export

__all__ = [
    "compute_stats",
    "count_new_groups",
    "merge",
    "normalize",
    "parse_export",
    "probe_export",
    "sort_newest_first",
    "transform_group",
    "validate_export",
]
