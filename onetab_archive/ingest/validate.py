"""Shape checks for raw OneTab exports.

Accepted top-level shapes, tried in order:

- ``{"state": {"tabGroups": [...]}}``
- ``{"tabGroups": [...]}``

Either ``state`` or ``tabGroups`` may arrive JSON-encoded as a string (OneTab
stores its state that way in extension storage), so each is decoded before its
shape is checked. Unknown extra fields are ignored.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..dates import epoch_to_iso
from ..errors import InvalidExportError

ACCEPTED_SHAPES = "{ state: { tabGroups: [...] } } or { tabGroups: [...] }"


@dataclass
class ShapeCheck:
    """Outcome of one shape probe: not matched, matched, or matched but invalid."""

    matched: bool
    groups: List[dict] = field(default_factory=list)
    error: str = ""


NO_MATCH = ShapeCheck(matched=False)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_epoch_ms(value: object) -> bool:
    """A finite number of milliseconds that `epoch_to_iso` can represent."""
    if not _is_number(value):
        return False
    try:
        if not math.isfinite(value):
            return False
        epoch_to_iso(value)
    except (OverflowError, ValueError):
        return False
    return True


def is_valid_tab(obj: object) -> bool:
    if not isinstance(obj, dict):
        return False
    return all(isinstance(obj.get(key), str) for key in ("id", "url", "title"))


def is_valid_group(obj: object) -> bool:
    if not isinstance(obj, dict):
        return False
    tabs_meta = obj.get("tabsMeta")
    return (
        isinstance(obj.get("id"), str)
        and _is_epoch_ms(obj.get("createDate"))
        and isinstance(tabs_meta, list)
        and all(is_valid_tab(tab) for tab in tabs_meta)
    )


def decode_field(value: object, name: str) -> object:
    """Decode a JSON-string-encoded field; other values pass through."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError as exc:
        raise InvalidExportError(f"Invalid OneTab export: could not parse {name} string ({exc})") from exc


def _check_groups(candidate: object, where: str) -> ShapeCheck:
    if not isinstance(candidate, list):
        return NO_MATCH
    for idx, group in enumerate(candidate):
        if not is_valid_group(group):
            return ShapeCheck(
                matched=True,
                error=(
                    f"Invalid OneTab export: {where} contains invalid entries "
                    f"(entry {idx} needs string id, millisecond createDate and tabsMeta "
                    "entries with string id, url and title)"
                ),
            )
    return ShapeCheck(matched=True, groups=list(candidate))


def check_state_shape(obj: dict) -> ShapeCheck:
    if obj.get("state") is None:
        return NO_MATCH
    state = decode_field(obj["state"], "state")
    if not isinstance(state, dict) or state.get("tabGroups") is None:
        return NO_MATCH
    tab_groups = decode_field(state["tabGroups"], "state.tabGroups")
    return _check_groups(tab_groups, "state.tabGroups")


def check_tab_groups_shape(obj: dict) -> ShapeCheck:
    if obj.get("tabGroups") is None:
        return NO_MATCH
    tab_groups = decode_field(obj["tabGroups"], "tabGroups")
    return _check_groups(tab_groups, "tabGroups")


SHAPE_CHECKS: List[Callable[[dict], ShapeCheck]] = [check_state_shape, check_tab_groups_shape]


def probe_export(raw: object) -> Optional[ShapeCheck]:
    """First matching shape check for `raw`, or None when no shape matches."""
    if not isinstance(raw, dict):
        return None
    for check in SHAPE_CHECKS:
        result = check(raw)
        if result.matched:
            return result
    return None


def validate_export(raw: object) -> List[dict]:
    """Return every raw group record in `raw` or raise InvalidExportError.

    A single malformed group rejects the whole batch.
    """
    if not isinstance(raw, dict):
        raise InvalidExportError("Invalid OneTab export: expected an object")

    result = probe_export(raw)
    if result is None:
        raise InvalidExportError(
            f"Invalid OneTab export: could not find tabGroups array. Expected {ACCEPTED_SHAPES}"
        )
    if result.error:
        raise InvalidExportError(result.error)
    return result.groups
