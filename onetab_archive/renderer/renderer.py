"""Export of the archive to Markdown files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

from ..config import DEFAULT_CFG
from ..ingest.storage import write_text
from ..log import log
from ..models import MasterData
from .buckets import bucket_groups, filter_groups_by_date, output_path
from .rendering import render_period, render_single_file


def export_periods(
    master: MasterData,
    out_dir: Union[str, Path],
    group_by: str = "month",
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    cfg: Optional[Dict] = None,
    generated: Optional[str] = None,
) -> Dict:
    """Write one Markdown file per period and return a summary.

    An empty selection writes nothing and reports zero counts.
    """
    cfg = cfg or DEFAULT_CFG
    ext = str(cfg.get("exportExtension") or ".md")
    marker = str(cfg.get("starredMarker") or DEFAULT_CFG["starredMarker"])
    groups = filter_groups_by_date(master.groups, date_from, date_to)
    summary = {
        "groupBy": group_by,
        "groups": len(groups),
        "tabs": sum(g.tab_count for g in groups),
        "periods": [],
        "files": [],
    }
    if not groups:
        return summary

    buckets = bucket_groups(groups, group_by)
    log(f"Grouped into {len(buckets)} {group_by}(s)")
    for key, members in buckets.items():
        path = output_path(out_dir, key, group_by, ext=ext)
        write_text(path, render_period(key, members, group_by, generated=generated, starred_marker=marker))
        summary["periods"].append(key)
        summary["files"].append(path)
        log(f"wrote {path}")
    return summary


def export_single_file(
    master: MasterData,
    out_path: Union[str, Path],
    cfg: Optional[Dict] = None,
    generated: Optional[str] = None,
) -> Path:
    cfg = cfg or DEFAULT_CFG
    marker = str(cfg.get("starredMarker") or DEFAULT_CFG["starredMarker"])
    return write_text(out_path, render_single_file(master, generated=generated, starred_marker=marker))
