"""Data models for the normalized OneTab archive."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .dates import epoch_to_iso

SCHEMA_VERSION = "1.0.0"


@dataclass
class Tab:
    id: str
    url: str
    title: str
    domain: str

    def to_dict(self) -> dict:
        return {"id": self.id, "url": self.url, "title": self.title, "domain": self.domain}

    @classmethod
    def from_dict(cls, data: dict) -> "Tab":
        return cls(
            id=str(data["id"]),
            url=str(data["url"]),
            title=str(data.get("title") or ""),
            domain=str(data.get("domain") or ""),
        )


@dataclass
class TabGroup:
    """Tabs saved together in one OneTab action.

    `created_at` and `tab_count` are derived when the group is built, so they
    always agree with `created_at_epoch` and `tabs`.
    """

    id: str
    tabs: List[Tab]
    created_at_epoch: int
    starred: bool = False
    title: Optional[str] = None
    created_at: str = field(init=False)
    tab_count: int = field(init=False)

    def __post_init__(self) -> None:
        self.created_at = epoch_to_iso(self.created_at_epoch)
        self.tab_count = len(self.tabs)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "tabs": [tab.to_dict() for tab in self.tabs],
            "createdAt": self.created_at,
            "createdAtEpoch": self.created_at_epoch,
            "tabCount": self.tab_count,
            "starred": self.starred,
        }
        if self.title is not None:
            data["title"] = self.title
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TabGroup":
        return cls(
            id=str(data["id"]),
            tabs=[Tab.from_dict(t) for t in data.get("tabs") or []],
            created_at_epoch=data["createdAtEpoch"],
            starred=bool(data.get("starred", False)),
            title=data.get("title"),
        )


@dataclass
class SourceInfo:
    browser: str = "unknown"
    extension_id: str = ""
    extraction_method: str = "import"

    def to_dict(self) -> dict:
        return {
            "browser": self.browser,
            "extensionId": self.extension_id,
            "extractionMethod": self.extraction_method,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SourceInfo":
        return cls(
            browser=str(data.get("browser") or "unknown"),
            extension_id=str(data.get("extensionId") or ""),
            extraction_method=str(data.get("extractionMethod") or "import"),
        )


@dataclass
class DateRange:
    earliest: str
    latest: str


@dataclass
class Stats:
    total_groups: int
    total_tabs: int
    date_range: DateRange

    def to_dict(self) -> dict:
        return {
            "totalGroups": self.total_groups,
            "totalTabs": self.total_tabs,
            "dateRange": {
                "earliest": self.date_range.earliest,
                "latest": self.date_range.latest,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Stats":
        date_range = data.get("dateRange") or {}
        return cls(
            total_groups=int(data.get("totalGroups") or 0),
            total_tabs=int(data.get("totalTabs") or 0),
            date_range=DateRange(
                earliest=str(date_range.get("earliest") or ""),
                latest=str(date_range.get("latest") or ""),
            ),
        )


@dataclass
class MasterData:
    exported_at: str
    source: SourceInfo
    stats: Stats
    groups: List[TabGroup]
    schema_version: str = SCHEMA_VERSION

    def to_dict(self) -> dict:
        return {
            "schemaVersion": self.schema_version,
            "exportedAt": self.exported_at,
            "source": self.source.to_dict(),
            "stats": self.stats.to_dict(),
            "groups": [g.to_dict() for g in self.groups],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MasterData":
        return cls(
            schema_version=str(data.get("schemaVersion") or SCHEMA_VERSION),
            exported_at=str(data.get("exportedAt") or ""),
            source=SourceInfo.from_dict(data.get("source") or {}),
            stats=Stats.from_dict(data.get("stats") or {}),
            groups=[TabGroup.from_dict(g) for g in data.get("groups") or []],
        )


@dataclass
class GroupRef:
    id: str
    created_at: str
    title: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "createdAt": self.created_at}
        if self.title is not None:
            data["title"] = self.title
        return data


@dataclass
class MatchFlags:
    in_title: bool = False
    in_url: bool = False
    in_domain: bool = False

    @property
    def any(self) -> bool:
        return self.in_title or self.in_url or self.in_domain

    def fields(self) -> List[str]:
        names = []
        if self.in_title:
            names.append("title")
        if self.in_url:
            names.append("url")
        if self.in_domain:
            names.append("domain")
        return names

    def to_dict(self) -> dict:
        return {"inTitle": self.in_title, "inUrl": self.in_url, "inDomain": self.in_domain}


@dataclass
class SearchResult:
    tab: Tab
    group: GroupRef
    matches: MatchFlags

    def to_dict(self) -> dict:
        return {
            "tab": self.tab.to_dict(),
            "group": self.group.to_dict(),
            "matches": self.matches.to_dict(),
        }
