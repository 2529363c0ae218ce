"""
Data integrity audit for a full Nightingale data document.

Reports, without modifying anything:
  - orphan cases            (case.personId not in people)
  - spouse orphans          (case.spouseId not in people)
  - orphan authorized reps  (case.authorizedReps entry not in people)
  - duplicate person ids    (raw id values, not normalized)
  - duplicate case ids

Reference checks compare normalized ids; duplicate checks compare the raw
stored values. Integrity problems are data in the report, never exceptions.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Hashable, List

from nightingale_cms.identity.normalizer import normalize_id
from nightingale_cms.logging import get_logger

log = get_logger(__name__)


@dataclass
class IntegritySummary:
    people_count: int = 0
    case_count: int = 0
    duplicate_person_ids: int = 0
    duplicate_case_ids: int = 0
    orphan_cases: int = 0
    spouse_orphans: int = 0
    orphan_authorized_reps: int = 0

    def issue_counts(self) -> Dict[str, int]:
        return {
            "duplicate_person_ids": self.duplicate_person_ids,
            "duplicate_case_ids": self.duplicate_case_ids,
            "orphan_cases": self.orphan_cases,
            "spouse_orphans": self.spouse_orphans,
            "orphan_authorized_reps": self.orphan_authorized_reps,
        }


@dataclass
class IntegrityDetails:
    duplicate_person_ids: List[Any] = field(default_factory=list)
    duplicate_case_ids: List[Any] = field(default_factory=list)
    orphan_cases: List[Dict[str, Any]] = field(default_factory=list)
    spouse_orphans: List[Dict[str, Any]] = field(default_factory=list)
    orphan_authorized_reps: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class IntegrityReport:
    summary: IntegritySummary
    details: IntegrityDetails

    @property
    def has_issues(self) -> bool:
        return any(v > 0 for v in self.summary.issue_counts().values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": asdict(self.summary),
            "details": asdict(self.details),
            "has_issues": self.has_issues,
        }


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _raw_key(value: Any) -> Hashable:
    """Hashable stand-in for a raw id; keeps 1 and "1" distinct."""
    try:
        hash(value)
    except TypeError:
        return (type(value).__name__, repr(value))
    return (type(value) is str, value)


def _duplicates(values: List[Any]) -> List[Any]:
    """Values seen more than once, each reported once, in first-repeat order."""
    seen = set()
    reported = set()
    out: List[Any] = []
    for v in values:
        key = _raw_key(v)
        if key in seen:
            if key not in reported:
                reported.add(key)
                out.append(v)
        else:
            seen.add(key)
    return out


def analyze(data: Any) -> IntegrityReport:
    """Single pass over cases; never raises for malformed collections."""
    data = data if isinstance(data, dict) else {}
    people = [p for p in _as_list(data.get("people")) if isinstance(p, dict)]
    cases = [c for c in _as_list(data.get("cases")) if isinstance(c, dict)]

    people_ids = {normalize_id(p.get("id")) for p in people}
    people_ids.discard("")

    def _known(ref: Any) -> bool:
        return normalize_id(ref) in people_ids

    details = IntegrityDetails()
    details.duplicate_person_ids = _duplicates([p.get("id") for p in people if p.get("id") is not None])
    details.duplicate_case_ids = _duplicates([c.get("id") for c in cases if c.get("id") is not None])

    for case in cases:
        case_id = case.get("id")

        person_id = case.get("personId")
        if person_id and not _known(person_id):
            details.orphan_cases.append({"caseId": case_id, "personId": person_id})

        spouse_id = case.get("spouseId")
        if spouse_id and not _known(spouse_id):
            details.spouse_orphans.append({"caseId": case_id, "spouseId": spouse_id})

        for rep_id in _as_list(case.get("authorizedReps")):
            if not _known(rep_id):
                details.orphan_authorized_reps.append({"caseId": case_id, "repId": rep_id})

    summary = IntegritySummary(
        people_count=len(people),
        case_count=len(cases),
        duplicate_person_ids=len(details.duplicate_person_ids),
        duplicate_case_ids=len(details.duplicate_case_ids),
        orphan_cases=len(details.orphan_cases),
        spouse_orphans=len(details.spouse_orphans),
        orphan_authorized_reps=len(details.orphan_authorized_reps),
    )

    report = IntegrityReport(summary=summary, details=details)
    log.info(
        "Integrity scan: people=%d cases=%d issues=%s",
        summary.people_count,
        summary.case_count,
        report.has_issues,
    )
    return report


__all__ = [
    "IntegrityDetails",
    "IntegrityReport",
    "IntegritySummary",
    "analyze",
]
