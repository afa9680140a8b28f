"""Presentation of search results and domain counts."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Tuple

from ..dates import date_only, now_iso
from ..models import MasterData, SearchResult
from ..renderer.rendering import escape_link_text, escape_md_url
from .query import SearchPredicates


def describe_predicates(predicates: SearchPredicates) -> List[str]:
    parts = []
    if predicates.query:
        parts.append(f'query: "{predicates.query}"')
    if predicates.url_pattern:
        parts.append(f"URL: /{predicates.url_pattern}/")
    if predicates.title_pattern:
        parts.append(f"title: /{predicates.title_pattern}/")
    if predicates.domain:
        parts.append(f"domain: {predicates.domain}")
    if predicates.date_from:
        parts.append(f"from: {predicates.date_from}")
    if predicates.date_to:
        parts.append(f"to: {predicates.date_to}")
    return parts


def query_label(predicates: SearchPredicates) -> str:
    return predicates.query or predicates.domain or predicates.url_pattern or "search"


def group_results_by_date(results: List[SearchResult]) -> List[Tuple[str, List[SearchResult]]]:
    """Results bucketed by their group's calendar date, newest date first."""
    by_date: Dict[str, List[SearchResult]] = {}
    for result in results:
        by_date.setdefault(date_only(result.group.created_at), []).append(result)
    return [(day, by_date[day]) for day in sorted(by_date, reverse=True)]


def format_results_for_console(results: List[SearchResult]) -> str:
    if not results:
        return "No matches found."

    lines: List[str] = []
    for day, day_results in group_results_by_date(results):
        lines.append("")
        lines.append(f"📅 {day}")
        for result in day_results:
            fields = ", ".join(result.matches.fields())
            lines.append(f"  • {result.tab.title} [{result.tab.domain}] ({fields})")
            lines.append(f"    {result.tab.url}")
    return "\n".join(lines)


def format_results_as_markdown(
    results: List[SearchResult],
    query: str,
    generated: Optional[str] = None,
) -> str:
    lines = [
        "---",
        f'query: "{query}"',
        f"results: {len(results)}",
        f'generated: "{generated or now_iso()}"',
        "---",
        "",
        f'# Search Results: "{query}"',
        "",
        f"> Found **{len(results)}** matching links",
        "",
    ]
    for day, day_results in group_results_by_date(results):
        lines.append(f"## {day}")
        lines.append("")
        for result in day_results:
            lines.append(f"- [{escape_link_text(result.tab.title)}]({escape_md_url(result.tab.url)})")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def results_envelope(results: List[SearchResult], query: str) -> dict:
    return {
        "query": query,
        "totalResults": len(results),
        "results": [r.to_dict() for r in results],
    }


def domain_counts(master: MasterData) -> List[Tuple[str, int]]:
    """Tab count per domain, most frequent first, ties alphabetical."""
    counts = Counter(tab.domain for group in master.groups for tab in group.tabs)
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def format_domain_counts(counts: List[Tuple[str, int]], limit: int = 50) -> str:
    lines = ["📊 Top Domains", ""]
    for domain, count in counts[:limit]:
        bar = "█" * min(count, 30)
        lines.append(f"{count:>4} {bar} {domain}")
    if len(counts) > limit:
        lines.append("")
        lines.append(f"... and {len(counts) - limit} more domains")
    lines.append("")
    lines.append(f"Total unique domains: {len(counts)}")
    return "\n".join(lines)
