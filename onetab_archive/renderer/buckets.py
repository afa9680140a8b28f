"""Period bucketing of tab groups for export."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

from ..dates import date_only, is_date_in_range, parse_flexible_date, year_month, year_week
from ..models import TabGroup

GROUP_BY_CHOICES = ("month", "week", "day")


def _check_group_by(group_by: str) -> str:
    if group_by not in GROUP_BY_CHOICES:
        raise ValueError(f"groupBy must be one of {', '.join(GROUP_BY_CHOICES)}: {group_by!r}")
    return group_by


def period_key(created_at: str, group_by: str) -> str:
    group_by = _check_group_by(group_by)
    if group_by == "month":
        return year_month(created_at)
    if group_by == "week":
        return year_week(created_at)
    return date_only(created_at)


def bucket_groups(groups: List[TabGroup], group_by: str) -> Dict[str, List[TabGroup]]:
    """Each group lands in exactly one period; only non-empty periods appear.

    Keys keep first-seen order and members keep input order.
    """
    buckets: Dict[str, List[TabGroup]] = {}
    for group in groups:
        buckets.setdefault(period_key(group.created_at, group_by), []).append(group)
    return buckets


def output_path(out_dir: Union[str, Path], key: str, group_by: str, ext: str = ".md") -> Path:
    """month/week -> <year>/<key><ext>; day -> <year>/<year-month>/<key><ext>."""
    group_by = _check_group_by(group_by)
    year = key[:4]
    if group_by == "day":
        return Path(out_dir) / year / key[:7] / f"{key}{ext}"
    return Path(out_dir) / year / f"{key}{ext}"


def filter_groups_by_date(
    groups: List[TabGroup],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> List[TabGroup]:
    if not date_from and not date_to:
        return list(groups)
    from_iso = parse_flexible_date(date_from) if date_from else None
    to_iso = parse_flexible_date(date_to, end_of_period=True) if date_to else None
    return [g for g in groups if is_date_in_range(g.created_at, from_iso, to_iso)]
