"""Identity-based merging of an incoming batch into the persisted archive."""

from __future__ import annotations

from ..dates import now_iso
from ..models import MasterData
from .stats import compute_stats, sort_newest_first


def merge(existing: MasterData, incoming: MasterData) -> MasterData:
    """Union of both group sets keyed by group id; existing groups always win.

    Provenance comes from `incoming`; ordering and stats are rebuilt from the
    merged groups.
    """
    existing_ids = {g.id for g in existing.groups}
    new_groups = []
    for group in incoming.groups:
        if group.id in existing_ids:
            continue
        existing_ids.add(group.id)
        new_groups.append(group)

    groups = sort_newest_first(list(existing.groups) + new_groups)
    return MasterData(
        exported_at=now_iso(),
        source=incoming.source,
        stats=compute_stats(groups),
        groups=groups,
    )


def count_new_groups(existing: MasterData, incoming: MasterData) -> int:
    existing_ids = {g.id for g in existing.groups}
    return len({g.id for g in incoming.groups} - existing_ids)
