from .exceptions import DocumentLoadError, MigrationError, NightingaleError

__all__ = [
    "DocumentLoadError",
    "MigrationError",
    "NightingaleError",
]
