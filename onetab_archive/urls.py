"""URL helpers."""

from __future__ import annotations

import re
import urllib.parse

_HOST_FALLBACK_RE = re.compile(r"^(?:https?://)?([^:/]+)", re.IGNORECASE)


def extract_domain(url: str) -> str:
    """Lower-cased hostname of `url`; never raises.

    URLs without a scheme, or ones urllib refuses, fall back to a regex that
    takes everything up to the first `:` or `/`.
    """
    url = str(url or "").strip()
    try:
        parsed = urllib.parse.urlsplit(url)
    except ValueError:
        parsed = None

    if parsed is not None and parsed.scheme:
        # about:blank, mailto: and friends have no host
        return (parsed.hostname or "").lower()

    match = _HOST_FALLBACK_RE.match(url)
    if match:
        return match.group(1).lower()
    return "unknown"
