"""
Data bootstrap: initialize -> detect legacy -> migrate -> persist.

The sequence runs once per initializer; concurrent and later callers get the
same ``InitResult``. A failed migration is logged and the pre-migration
document is used so the application still starts.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from nightingale_cms.config import get_config
from nightingale_cms.logging import get_logger
from nightingale_cms.migration import detect_legacy_profile, run_full_migration
from nightingale_cms.migration.engine import MigrationReport, MigrationResult
from nightingale_cms.services.data_service import JsonFileDataService, get_data_service

Migrator = Callable[..., MigrationResult]


@dataclass
class InitResult:
    success: bool
    data: Optional[Dict[str, Any]] = None
    migrated: bool = False
    migration_report: Optional[MigrationReport] = None
    error: Optional[str] = None


class DataInitializer:
    def __init__(
        self,
        service: JsonFileDataService,
        *,
        migrate: Migrator = run_full_migration,
        logger: Optional[logging.Logger] = None,
        apply_fixes: Optional[bool] = None,
    ):
        self.service = service
        self.migrate = migrate
        self.log = logger or get_logger("migration")
        if apply_fixes is None:
            apply_fixes = bool(get_config().migration.get("apply_fixes", True))
        self.apply_fixes = apply_fixes

        self._lock = threading.Lock()
        self._result: Optional[InitResult] = None

    def run(self) -> InitResult:
        with self._lock:
            if self._result is None:
                self._result = self._bootstrap()
            return self._result

    def reset(self) -> None:
        with self._lock:
            self._result = None

    def _bootstrap(self) -> InitResult:
        init = self.service.initialize()
        if not init.success:
            return InitResult(success=False, error=init.error)

        data = init.data
        if data is None:
            return InitResult(success=True, data=None)

        try:
            profile = detect_legacy_profile(data)
            if not profile.is_legacy:
                return InitResult(success=True, data=data)

            self.log.info("Legacy data detected: %s", ", ".join(profile.summary))
            result = self.migrate(data, apply_fixes=self.apply_fixes)

            saved = self.service.write_data(result.migrated_data)
            if not saved.success:
                raise RuntimeError(saved.error)

            return InitResult(
                success=True,
                data=saved.data,
                migrated=True,
                migration_report=result.report,
            )
        except Exception as exc:
            self.log.warning("migration_bootstrap_failed: %s", exc)
            return InitResult(success=True, data=data)


_initializer: Optional[DataInitializer] = None
_initializer_lock = threading.Lock()


def init_data(service: Optional[JsonFileDataService] = None) -> InitResult:
    """Run (or return the memoized result of) the process-wide bootstrap."""
    global _initializer
    with _initializer_lock:
        if _initializer is None:
            _initializer = DataInitializer(service or get_data_service())
        initializer = _initializer
    return initializer.run()


def reset_init_data() -> None:
    global _initializer
    with _initializer_lock:
        _initializer = None


__all__ = ["DataInitializer", "InitResult", "init_data", "reset_init_data"]
