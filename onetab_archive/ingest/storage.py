"""Reading and writing the persisted master record and other JSON/text files."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Union

from ..dates import now_iso
from ..models import MasterData
from .stats import compute_stats, sort_newest_first

PathLike = Union[str, Path]


def ensure_parent(path: PathLike) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def write_text(path: PathLike, text: str) -> Path:
    p = ensure_parent(path)
    p.write_text(text, encoding="utf-8")
    return p


def write_json(path: PathLike, data: object) -> Path:
    return write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def load_json_payload(path: PathLike) -> object:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input file not found: {p}")
    return json.loads(p.read_text(encoding="utf-8"))


def load_master(path: PathLike) -> MasterData:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Master data not found: {p}")
    return MasterData.from_dict(json.loads(p.read_text(encoding="utf-8")))


def save_master(path: PathLike, master: MasterData) -> MasterData:
    """Write `master` with a fresh `exportedAt` and stats rebuilt from its groups.

    Returns the record exactly as written.
    """
    groups = sort_newest_first(master.groups)
    written = replace(
        master,
        exported_at=now_iso(),
        stats=compute_stats(groups, empty_range=master.stats.date_range),
        groups=groups,
    )
    write_json(path, written.to_dict())
    return written
