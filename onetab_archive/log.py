"""Minimal stderr logging shared by the CLI and the store reader."""

from __future__ import annotations

import sys
from datetime import datetime

VERBOSE = False


def set_verbose(flag: bool) -> None:
    global VERBOSE
    VERBOSE = bool(flag)


def log(msg: str) -> None:
    if not VERBOSE:
        return
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[onetab] {ts} {msg}", file=sys.stderr)


def warn(msg: str, stderr=None) -> None:
    print(f"Warning: {msg}", file=stderr or sys.stderr)
