"""
JSON-file data service.

Owns the single persisted document: reads it, writes whole-document
revisions, caches the current revision, and notifies subscribers after each
write. Partial updates go through ``safe_merge`` so a missing collection in
an update never wipes the stored one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from nightingale_cms.config import get_config
from nightingale_cms.core.exceptions import DocumentLoadError
from nightingale_cms.logging import get_logger
from nightingale_cms.merge import PRESERVED_KEYS, safe_merge
from nightingale_cms.migration.transforms import SCHEMA_VERSION
from nightingale_cms.services.document_io import load_document, write_document

log = get_logger(__name__)

Listener = Callable[[Dict[str, Any]], None]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class OperationResult:
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=_now)


def empty_document() -> Dict[str, Any]:
    return {
        "cases": [],
        "people": [],
        "organizations": [],
        "metadata": {
            "schemaVersion": SCHEMA_VERSION,
            "lastSaved": _now(),
            "totalEntities": 0,
        },
    }


def validate_structure(data: Any) -> Optional[str]:
    """Return a reason string when ``data`` is not a usable document."""
    if not isinstance(data, dict):
        return "document is not a JSON object"
    for key in PRESERVED_KEYS:
        if key in data and not isinstance(data[key], list):
            return f"'{key}' must be a list"
    return None


class JsonFileDataService:
    def __init__(self, path: str | Path, auto_save: bool = True):
        self.path = Path(path)
        self.auto_save = auto_save
        self._data: Optional[Dict[str, Any]] = None
        self._listeners: List[Listener] = []

    # -----------------------------
    # Loading
    # -----------------------------

    def read_data(self) -> OperationResult:
        try:
            data = load_document(self.path)
        except DocumentLoadError as exc:
            return OperationResult(success=False, error=str(exc))

        problem = validate_structure(data)
        if problem:
            return OperationResult(success=False, error=f"Invalid data structure: {problem}")
        return OperationResult(success=True, data=data)

    def initialize(self) -> OperationResult:
        """
        Load the stored document. A missing file starts an empty document
        (written immediately when auto_save is on); an unreadable or invalid
        file is an error and is left untouched.
        """
        if not self.path.exists():
            log.info("No data file at %s; starting empty document", self.path)
            self._data = empty_document()
            if self.auto_save:
                saved = self.write_data(self._data)
                if not saved.success:
                    return saved
            return OperationResult(success=True, data=self._data)

        result = self.read_data()
        if not result.success:
            log.error("Failed to initialize data service: %s", result.error)
            return OperationResult(success=False, error=f"Failed to initialize data service: {result.error}")

        self._data = result.data
        return OperationResult(success=True, data=self._data)

    def reload_data(self) -> OperationResult:
        self._data = None
        return self.initialize()

    def get_current_data(self) -> Optional[Dict[str, Any]]:
        return self._data

    # -----------------------------
    # Writing
    # -----------------------------

    def write_data(self, data: Dict[str, Any]) -> OperationResult:
        problem = validate_structure(data)
        if problem:
            return OperationResult(success=False, error=f"Invalid data structure provided: {problem}")

        metadata = dict(data.get("metadata") or {})
        metadata["lastSaved"] = _now()
        metadata["totalEntities"] = sum(len(data.get(k) or []) for k in PRESERVED_KEYS)
        revision = {**data, "metadata": metadata}

        try:
            write_document(revision, self.path)
        except OSError as exc:
            log.error("Failed to write %s: %s", self.path, exc)
            return OperationResult(success=False, error=f"Failed to write data: {exc}")

        self._data = revision
        self._notify(revision)
        return OperationResult(success=True, data=revision)

    def update_data(self, partial: Dict[str, Any]) -> OperationResult:
        """Merge a partial update over the current revision and persist it."""
        return self.write_data(safe_merge(self._data, partial))

    # -----------------------------
    # Subscriptions
    # -----------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, data: Dict[str, Any]) -> None:
        for listener in list(self._listeners):
            try:
                listener(data)
            except Exception:
                log.exception("Error in data change listener")


_service: Optional[JsonFileDataService] = None


def get_data_service() -> JsonFileDataService:
    """Process-wide service bound to the configured data file."""
    global _service
    if _service is None:
        _service = JsonFileDataService(get_config().paths["data_file"])
    return _service


__all__ = [
    "JsonFileDataService",
    "OperationResult",
    "empty_document",
    "get_data_service",
    "validate_structure",
]
