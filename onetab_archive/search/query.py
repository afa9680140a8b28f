"""Predicate evaluation over every tab of the archive."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import List, Optional, Pattern

from ..dates import is_date_in_range, parse_flexible_date
from ..log import warn
from ..models import GroupRef, MasterData, MatchFlags, SearchResult, Tab


@dataclass
class SearchPredicates:
    query: Optional[str] = None
    title_pattern: Optional[str] = None
    url_pattern: Optional[str] = None
    domain: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None


def has_predicates(predicates: SearchPredicates) -> bool:
    return any(
        (
            predicates.query,
            predicates.title_pattern,
            predicates.url_pattern,
            predicates.domain,
            predicates.date_from,
            predicates.date_to,
        )
    )


def compile_pattern(pattern: Optional[str], label: str, stderr=None) -> Optional[Pattern]:
    """Case-insensitive regex, or None (never matches) when missing or invalid."""
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        warn(f"Invalid {label} regex: {pattern} ({exc})", stderr=stderr)
        return None


def match_tab(
    tab: Tab,
    predicates: SearchPredicates,
    title_re: Optional[Pattern] = None,
    url_re: Optional[Pattern] = None,
) -> MatchFlags:
    flags = MatchFlags()

    if predicates.query:
        needle = predicates.query.lower()
        flags.in_title = needle in tab.title.lower()
        flags.in_url = needle in tab.url.lower()
        flags.in_domain = needle in tab.domain.lower()

    if title_re is not None and title_re.search(tab.title):
        flags.in_title = True
    if url_re is not None and url_re.search(tab.url):
        flags.in_url = True

    if predicates.domain and predicates.domain.lower() in tab.domain.lower():
        flags.in_domain = True

    return flags


def search(master: MasterData, predicates: SearchPredicates, stderr=None) -> List[SearchResult]:
    """Tabs matching at least one text/pattern/domain predicate.

    The date range is applied per group before any tab predicate. Invalid
    regexes are reported on `stderr` and treated as never matching.
    """
    stderr = stderr or sys.stderr
    title_re = compile_pattern(predicates.title_pattern, "title", stderr=stderr)
    url_re = compile_pattern(predicates.url_pattern, "URL", stderr=stderr)
    from_iso = parse_flexible_date(predicates.date_from) if predicates.date_from else None
    to_iso = parse_flexible_date(predicates.date_to, end_of_period=True) if predicates.date_to else None

    results: List[SearchResult] = []
    for group in master.groups:
        if not is_date_in_range(group.created_at, from_iso, to_iso):
            continue
        ref = GroupRef(id=group.id, created_at=group.created_at, title=group.title)
        for tab in group.tabs:
            flags = match_tab(tab, predicates, title_re=title_re, url_re=url_re)
            if flags.any:
                results.append(SearchResult(tab=tab, group=ref, matches=flags))
    return results
