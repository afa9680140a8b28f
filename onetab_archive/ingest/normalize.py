"""Conversion of validated OneTab records into the normalized archive model."""

from __future__ import annotations

from typing import List

from ..dates import now_iso
from ..models import MasterData, SourceInfo, Tab, TabGroup
from ..urls import extract_domain
from .stats import compute_stats, sort_newest_first
from .validate import validate_export


def transform_tab(raw: dict) -> Tab:
    url = raw["url"]
    domain = extract_domain(url)
    return Tab(id=raw["id"], url=url, title=raw["title"] or domain, domain=domain)


def transform_group(raw: dict) -> TabGroup:
    title = raw.get("title")
    return TabGroup(
        id=raw["id"],
        tabs=[transform_tab(tab) for tab in raw["tabsMeta"]],
        created_at_epoch=raw["createDate"],
        starred=bool(raw.get("starred") or False),
        title=title if isinstance(title, str) else None,
    )


def normalize(raw_groups: List[dict], source: SourceInfo) -> MasterData:
    """Build a fresh MasterData from validated raw groups, newest first."""
    groups = sort_newest_first([transform_group(raw) for raw in raw_groups])
    return MasterData(
        exported_at=now_iso(),
        source=source,
        stats=compute_stats(groups),
        groups=groups,
    )


def parse_export(raw: object, source: SourceInfo) -> MasterData:
    return normalize(validate_export(raw), source)
