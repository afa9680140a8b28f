"""Markdown rendering of tab groups, period files and the single-file export."""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote

from ..config import DEFAULT_CFG
from ..dates import date_only, format_date_for_header, now_iso
from ..ingest.stats import compute_stats
from ..models import MasterData, TabGroup
from .buckets import bucket_groups


def escape_link_text(text: str) -> str:
    if not text:
        return ""
    text = text.replace("\\", "\\\\")
    for ch in ("[", "]"):
        text = text.replace(ch, "\\" + ch)
    return text


def escape_md_url(url: str) -> str:
    if not url:
        return ""
    # Whitespace and parentheses would end the link destination early.
    return quote(url, safe=":/?#[]@!$&'*+,;=%-._~")


def _sort_newest_first(groups: List[TabGroup]) -> List[TabGroup]:
    return sorted(groups, key=lambda g: g.created_at_epoch, reverse=True)


def _total_tabs(groups: List[TabGroup]) -> int:
    return sum(g.tab_count for g in groups)


def _frontmatter(fields: List[tuple]) -> List[str]:
    lines = ["---"]
    for key, val in fields:
        if isinstance(val, str):
            lines.append(f'{key}: "{val}"')
        else:
            lines.append(f"{key}: {val}")
    lines.append("---")
    return lines


def render_group(group: TabGroup, starred_marker: str = DEFAULT_CFG["starredMarker"]) -> List[str]:
    heading = f"### {format_date_for_header(group.created_at)}"
    if group.title:
        heading += f" - {group.title}"
    if group.starred:
        heading += f" {starred_marker}"

    lines = [heading, ""]
    for tab in group.tabs:
        label = escape_link_text(tab.title or tab.domain)
        lines.append(f"- [{label}]({escape_md_url(tab.url)})")
    lines.append("")
    return lines


def render_period(
    key: str,
    groups: List[TabGroup],
    group_by: str,
    generated: Optional[str] = None,
    starred_marker: str = DEFAULT_CFG["starredMarker"],
) -> str:
    total_tabs = _total_tabs(groups)
    lines: List[str] = []
    lines.extend(
        _frontmatter(
            [
                ("period", key),
                ("groupBy", group_by),
                ("totalGroups", len(groups)),
                ("totalTabs", total_tabs),
                ("generated", generated or now_iso()),
            ]
        )
    )
    lines.append("")
    lines.append(f"# OneTab Links: {key}")
    lines.append("")
    lines.append(f"> **{len(groups)}** tab groups, **{total_tabs}** total links")
    lines.append("")

    for group in _sort_newest_first(groups):
        lines.extend(render_group(group, starred_marker))

    return "\n".join(lines).rstrip() + "\n"


def render_single_file(
    master: MasterData,
    generated: Optional[str] = None,
    starred_marker: str = DEFAULT_CFG["starredMarker"],
) -> str:
    """Every month as a `##` section of one document, newest month first.

    Header counts come from `master.groups`, not from the stored stats.
    """
    stats = compute_stats(master.groups, empty_range=master.stats.date_range)
    date_range = f"{date_only(stats.date_range.earliest)} to {date_only(stats.date_range.latest)}"

    lines: List[str] = []
    lines.extend(
        _frontmatter(
            [
                ("title", "OneTab Links Export"),
                ("totalGroups", stats.total_groups),
                ("totalTabs", stats.total_tabs),
                ("dateRange", date_range),
                ("generated", generated or now_iso()),
            ]
        )
    )
    lines.append("")
    lines.append("# OneTab Links Export")
    lines.append("")
    lines.append(f"> **{stats.total_groups}** groups, **{stats.total_tabs}** tabs")
    lines.append(f"> From {date_range}")
    lines.append("")

    by_month = bucket_groups(master.groups, "month")
    for month in sorted(by_month, reverse=True):
        lines.append(f"## {month}")
        lines.append("")
        for group in _sort_newest_first(by_month[month]):
            lines.extend(render_group(group, starred_marker))

    return "\n".join(lines).rstrip() + "\n"
