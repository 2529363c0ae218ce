"""
Full migration run: detect, apply the ordered transforms, report.

The caller's document is deep-copied; the returned ``migrated_data`` is the
complete document (unrelated top-level keys included), not a diff.
A transform that blows up is re-raised as ``MigrationError`` so hosts can
fall back to the pre-migration document.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

from nightingale_cms.core.exceptions import MigrationError
from nightingale_cms.identity.normalizer import normalize_id
from nightingale_cms.logging import get_logger
from nightingale_cms.migration.detect import detect_legacy_profile
from nightingale_cms.migration.transforms import COLLECTIONS, TRANSFORMS

log = get_logger(__name__)


@dataclass
class MigrationReport:
    legacy_detected: bool = False
    indicators: Dict[str, bool] = field(default_factory=dict)
    applied_transforms: List[str] = field(default_factory=list)
    # transform name -> ids of records it changed; untouched transforms are omitted
    changes: Dict[str, List[str]] = field(default_factory=dict)
    counts: Dict[str, Dict[str, int]] = field(default_factory=dict)
    warnings: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "legacy_detected": self.legacy_detected,
            "indicators": dict(self.indicators),
            "applied_transforms": list(self.applied_transforms),
            "changes": {k: list(v) for k, v in self.changes.items()},
            "counts": copy.deepcopy(self.counts),
            "warnings": copy.deepcopy(self.warnings),
        }


@dataclass
class MigrationResult:
    migrated_data: Dict[str, Any]
    report: MigrationReport


def _collection_counts(doc: Dict[str, Any]) -> Dict[str, int]:
    return {
        key: len(doc[key]) if isinstance(doc.get(key), list) else 0
        for key in COLLECTIONS
    }


def _orphan_person_ids(doc: Dict[str, Any]) -> List[str]:
    people = doc.get("people") if isinstance(doc.get("people"), list) else []
    cases = doc.get("cases") if isinstance(doc.get("cases"), list) else []
    known = {normalize_id(p.get("id")) for p in people if isinstance(p, dict)}

    out: List[str] = []
    for case in cases:
        if not isinstance(case, dict) or not case.get("personId"):
            continue
        pid = normalize_id(case["personId"])
        if pid not in known and pid not in out:
            out.append(pid)
    return out


def run_full_migration(data: Any, apply_fixes: bool = True) -> MigrationResult:
    """
    Apply every structural transform (and the data fixes unless
    ``apply_fixes`` is False) to a copy of ``data``.

    Idempotent: migrating already-migrated data yields ``report.changes == {}``.
    """
    if not isinstance(data, dict):
        raise MigrationError(f"Expected a JSON object document, got {type(data).__name__}")

    before = copy.deepcopy(data)
    profile = detect_legacy_profile(before)
    working = copy.deepcopy(before)

    report = MigrationReport(
        legacy_detected=profile.is_legacy,
        indicators=dict(profile.indicators),
    )

    for transform in TRANSFORMS:
        if transform.is_fix and not apply_fixes:
            log.debug("Skipping fix transform %s", transform.name)
            continue

        try:
            changed = transform.apply(working)
        except Exception as exc:
            log.exception("Migration transform %s failed", transform.name)
            raise MigrationError(f"{transform.name} failed: {exc}") from exc

        report.applied_transforms.append(transform.name)
        if changed:
            report.changes[transform.name] = changed
            log.info("Transform %s changed %d record(s)", transform.name, len(changed))

    report.counts = {
        "before": _collection_counts(before),
        "after": _collection_counts(working),
    }
    report.warnings = {"orphan_case_person_ids": _orphan_person_ids(working)}

    log.info(
        "Migration complete. legacy=%s transforms_changed=%d",
        report.legacy_detected,
        len(report.changes),
    )
    return MigrationResult(migrated_data=working, report=report)


__all__ = ["MigrationReport", "MigrationResult", "run_full_migration"]
