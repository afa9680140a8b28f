"""Aggregate statistics over tab groups."""

from __future__ import annotations

from typing import List, Optional

from ..dates import now_iso
from ..models import DateRange, Stats, TabGroup


def sort_newest_first(groups: List[TabGroup]) -> List[TabGroup]:
    return sorted(groups, key=lambda g: g.created_at_epoch, reverse=True)


def compute_stats(groups: List[TabGroup], empty_range: Optional[DateRange] = None) -> Stats:
    """Recompute stats from scratch.

    With no groups the date range falls back to `empty_range`, or to now.
    """
    total_tabs = sum(g.tab_count for g in groups)
    if groups:
        # ISO-8601 UTC strings of equal width order lexicographically by time
        dates = [g.created_at for g in groups]
        date_range = DateRange(earliest=min(dates), latest=max(dates))
    elif empty_range is not None and empty_range.earliest:
        date_range = DateRange(earliest=empty_range.earliest, latest=empty_range.latest)
    else:
        now = now_iso()
        date_range = DateRange(earliest=now, latest=now)
    return Stats(total_groups=len(groups), total_tabs=total_tabs, date_range=date_range)
