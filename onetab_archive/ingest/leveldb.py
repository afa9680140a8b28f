"""Read OneTab's state straight from the extension's LevelDB store.

Chrome and Edge keep `chrome.storage.local` for each extension in
``<User Data>/<profile>/Local Extension Settings/<extension id>``: a LevelDB
directory whose keys are storage keys and whose values are JSON texts.

The store is read with ``ccl_chromium_reader``'s raw LevelDB reader, which
parses the files directly and never opens the database for writing.
"""

from __future__ import annotations

import json
import os
import shutil
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from ..config import BROWSER_USER_DATA, DEFAULT_CFG
from ..errors import InvalidExportError, StoreAccessError
from ..log import log
from ..models import MasterData, SourceInfo
from .normalize import parse_export
from .validate import probe_export

PathLike = Union[str, Path]


def _load_ccl_leveldb():
    from ccl_chromium_reader.storage_formats import ccl_leveldb  # type: ignore

    return ccl_leveldb


LOCKED_HINT = (
    "If the browser is running it may hold the store open: close it, or copy the "
    "directory first with `onetab copy-db <store> ./leveldb-copy` and import the copy."
)


def default_store_path(
    browser: str,
    extension_id: str,
    profile: str = "Default",
    local_app_data: Optional[str] = None,
) -> Path:
    """Windows location of an extension's Local Extension Settings store."""
    if local_app_data is None:
        local_app_data = os.environ.get("LOCALAPPDATA")
    if not local_app_data:
        raise StoreAccessError("LOCALAPPDATA environment variable not set")
    parts = BROWSER_USER_DATA.get(browser)
    if parts is None:
        raise StoreAccessError(f"No known store location for browser: {browser}")
    return Path(local_app_data).joinpath(*parts, profile, "Local Extension Settings", extension_id)


def check_store_dir(path: PathLike) -> Path:
    p = Path(path)
    if not p.is_dir():
        raise StoreAccessError(f"LevelDB path does not exist: {p}")
    if not (p / "CURRENT").exists():
        raise StoreAccessError(f"Invalid LevelDB directory (CURRENT file not found): {p}")
    return p


@contextmanager
def open_store(path: PathLike) -> Iterator[object]:
    """Open the store read-only; it is closed on every exit path."""
    p = check_store_dir(path)
    log(f"Opening LevelDB at: {p}")
    try:
        db = _load_ccl_leveldb().RawLevelDb(p)
    except (OSError, ValueError) as exc:
        raise StoreAccessError(f"Could not open LevelDB at {p}: {exc}. {LOCKED_HINT}") from exc
    try:
        yield db
    finally:
        db.close()


def _decode(raw: object) -> str:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace")
    return str(raw)


def read_latest_values(db) -> Dict[str, str]:
    """Live value of every key; the highest sequence number wins."""
    deleted = _load_ccl_leveldb().KeyState.Deleted
    latest: Dict[str, tuple] = {}
    for record in db.iterate_records_raw():
        key = _decode(getattr(record, "user_key", record.key))
        seq = int(getattr(record, "seq", 0) or 0)
        current = latest.get(key)
        if current is not None and current[0] > seq:
            continue
        live = getattr(record, "state", None) != deleted
        latest[key] = (seq, live, record.value)
    return {key: _decode(value) for key, (_seq, live, value) in sorted(latest.items()) if live}


def read_store_values(path: PathLike) -> Dict[str, str]:
    with open_store(path) as db:
        return read_latest_values(db)


def list_keys(path: PathLike) -> List[str]:
    return sorted(read_store_values(path))


def _loads_or_raw(value: str) -> object:
    try:
        return json.loads(value)
    except ValueError:
        return value


def dump_store(path: PathLike) -> Dict[str, object]:
    return {key: _loads_or_raw(value) for key, value in read_store_values(path).items()}


def _wrap_candidate(key: str, parsed: object) -> dict:
    # `_state` / `_tabGroups` hold the same shapes as their unprefixed names.
    return {key.lstrip("_"): parsed}


def find_onetab_payload(values: Dict[str, str], cfg: Optional[Dict] = None) -> Optional[dict]:
    """Locate a raw OneTab export among the store's key/value pairs.

    Known keys are probed first; a candidate only counts if it has a valid
    shape. Otherwise every key mentioning a state/tab-group hint is decoded and
    checked for a nested `state` or `tabGroups` object.
    """
    cfg = cfg or DEFAULT_CFG
    first_error = ""

    for key in cfg.get("storeCandidateKeys", []):
        if key not in values:
            continue
        candidate = _wrap_candidate(key, _loads_or_raw(values[key]))
        try:
            result = probe_export(candidate)
        except InvalidExportError as exc:
            first_error = first_error or str(exc)
            continue
        if result is not None and not result.error:
            log(f'Found OneTab data in key: "{key}"')
            return candidate
        if result is not None:
            first_error = first_error or result.error

    log("Scanning database for OneTab data...")
    hints = [h.lower() for h in cfg.get("storeScanHints", [])]
    scanned: Dict[str, object] = {}
    for key, value in values.items():
        if not any(h in key.lower() for h in hints):
            continue
        try:
            scanned[key] = json.loads(value)
        except ValueError:
            continue

    candidates: List[dict] = []
    if "state" in scanned:
        candidates.append({"state": scanned["state"]})
    if "tabGroups" in scanned:
        candidates.append({"tabGroups": scanned["tabGroups"]})
    for value in scanned.values():
        if isinstance(value, dict) and ("tabGroups" in value or "state" in value):
            candidates.append(value)

    for candidate in candidates:
        try:
            result = probe_export(candidate)
        except InvalidExportError:
            continue
        if result is not None and not result.error:
            return candidate
    if candidates:
        # let validation report what is wrong with the closest match
        return candidates[0]
    if first_error:
        raise InvalidExportError(first_error)
    return None


def read_store_payload(path: PathLike, cfg: Optional[Dict] = None) -> dict:
    payload = find_onetab_payload(read_store_values(path), cfg)
    if payload is None:
        raise InvalidExportError(
            "Could not find OneTab data in LevelDB. The database may be empty or use a different format."
        )
    return payload


def parse_store(path: PathLike, source: SourceInfo, cfg: Optional[Dict] = None) -> MasterData:
    return parse_export(read_store_payload(path, cfg), replace(source, extraction_method="leveldb"))


def copy_store(src: PathLike, dest: PathLike, cfg: Optional[Dict] = None) -> List[Path]:
    """Copy a LevelDB directory without its LOCK file so it can be read offline."""
    cfg = cfg or DEFAULT_CFG
    src_dir = check_store_dir(src)
    dest_dir = Path(dest)
    skip = set(cfg.get("storeSkipOnCopy", ["LOCK"]))
    dest_dir.mkdir(parents=True, exist_ok=True)
    copied: List[Path] = []
    for entry in sorted(src_dir.iterdir()):
        if not entry.is_file() or entry.name in skip:
            continue
        try:
            target = Path(shutil.copy2(entry, dest_dir / entry.name))
        except PermissionError as exc:
            raise StoreAccessError(f"Permission denied copying {entry}: {exc}. {LOCKED_HINT}") from exc
        copied.append(target)
        log(f"copied {entry.name}")
    return copied
