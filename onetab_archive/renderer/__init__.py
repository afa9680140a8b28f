"""Period bucketing and Markdown export."""

from .buckets import bucket_groups, filter_groups_by_date, output_path, period_key
from .renderer import export_periods, export_single_file
from .rendering import render_group, render_period, render_single_file

__all__ = [
    "bucket_groups",
    "export_periods",
    "export_single_file",
    "filter_groups_by_date",
    "output_path",
    "period_key",
    "render_group",
    "render_period",
    "render_single_file",
]
