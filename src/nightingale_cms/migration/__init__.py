"""
Legacy detection and migration.

Hosts that want to load this lazily can import it inside their bootstrap;
nothing here has import-time side effects beyond logger setup.
"""

from __future__ import annotations

from .detect import LegacyProfile, detect_legacy_profile
from .engine import MigrationReport, MigrationResult, run_full_migration

__all__ = [
    "LegacyProfile",
    "MigrationReport",
    "MigrationResult",
    "detect_legacy_profile",
    "run_full_migration",
]
