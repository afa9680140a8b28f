"""Error types raised by ingestion and store access."""


class InvalidExportError(ValueError):
    """The raw OneTab payload does not have an accepted shape."""


class StoreAccessError(RuntimeError):
    """The extension's LevelDB store could not be opened or read."""
