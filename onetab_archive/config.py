"""Importer configuration and shared constants."""

from __future__ import annotations

from typing import Dict

DEFAULT_CFG: Dict = {
    # OneTab's extension ids in the Edge add-ons store and the Chrome web store.
    "extensionIds": {
        "edge": "hoimpamkkoehapgenciaoajfkfkpgfop",
        "chrome": "chphlpgkkbolifaimnlloiipkdnihall",
    },
    "defaultBrowser": "edge",
    "knownBrowsers": ["edge", "chrome", "firefox"],
    "masterJson": "./data/master.json",
    "outputDir": "./output",
    "leveldbCopy": "./leveldb-copy",
    "storeCandidateKeys": ["state", "_state", "tabGroups", "_tabGroups"],
    "storeScanHints": ["state", "tabgroup", "onetab"],
    "storeSkipOnCopy": ["LOCK"],
    "browserProfile": "Default",
    "exportExtension": ".md",
    "singleFileName": "all-links.md",
    "defaultGroupBy": "month",
    "domainsLimit": 50,
    "starredMarker": "⭐",
}

BROWSER_USER_DATA = {
    "edge": ("Microsoft", "Edge", "User Data"),
    "chrome": ("Google", "Chrome", "User Data"),
}


def merge_cfg(file_cfg: Dict | None, override_cfg: Dict | None) -> Dict:
    merged = dict(DEFAULT_CFG)
    if file_cfg:
        merged.update(file_cfg)
    if override_cfg:
        merged.update({k: v for k, v in override_cfg.items() if v is not None})
    return merged


def extension_id_for(cfg: Dict, browser: str) -> str:
    ids = cfg.get("extensionIds") or {}
    return str(ids.get(browser) or "")
