class NightingaleError(Exception):
    """Base exception for Nightingale CMS failures."""


class DocumentLoadError(NightingaleError):
    """Raised when a data document cannot be read or parsed."""


class MigrationError(NightingaleError):
    """Raised when a migration transform cannot complete."""
