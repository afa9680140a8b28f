"""OneTab archive: extract, merge, search and export saved tab groups."""

from .config import DEFAULT_CFG, merge_cfg
from .errors import InvalidExportError, StoreAccessError
from .models import SCHEMA_VERSION, MasterData, SearchResult, Tab, TabGroup

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_CFG",
    "merge_cfg",
    "InvalidExportError",
    "StoreAccessError",
    "SCHEMA_VERSION",
    "MasterData",
    "SearchResult",
    "Tab",
    "TabGroup",
]
