"""
Legacy profile detection.

Inspects a document for shapes written by older schema versions. Read-only:
the input is never modified. Each indicator corresponds to a transform that
would change something, so a migrated document is no longer legacy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from nightingale_cms.identity.normalizer import build_people_index
from nightingale_cms.migration.transforms import (
    COLLECTIONS,
    FINANCIAL_SECTIONS,
    client_name_candidate,
    composite_name,
    is_number,
)

INDICATOR_LABELS = {
    "person_missing_name": "person name backfill",
    "case_missing_client_name": "case clientName backfill",
    "numeric_ids": "numeric ids",
    "case_person_id_numeric": "numeric case.personId",
    "has_master_case_number": "masterCaseNumber -> mcn",
    "financial_value_field": "financial value -> amount",
    "financial_type_without_description": "financial type -> description",
    "missing_financials": "missing financials structure",
    "missing_metadata": "missing metadata",
}


@dataclass
class LegacyProfile:
    is_legacy: bool = False
    indicators: Dict[str, bool] = field(default_factory=dict)
    summary: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_legacy": self.is_legacy,
            "indicators": dict(self.indicators),
            "summary": list(self.summary),
        }


def _dicts(value: Any) -> List[Dict[str, Any]]:
    return [r for r in value if isinstance(r, dict)] if isinstance(value, list) else []


def _financial_items(case: Dict[str, Any]):
    financials = case.get("financials")
    if not isinstance(financials, dict):
        return
    for section in FINANCIAL_SECTIONS:
        for item in _dicts(financials.get(section)):
            yield item


def _has_numeric_refs(case: Dict[str, Any]) -> bool:
    reps = case.get("authorizedReps")
    reps = reps if isinstance(reps, list) else []
    return (
        is_number(case.get("personId"))
        or is_number(case.get("spouseId"))
        or any(is_number(r) for r in reps)
    )


def detect_legacy_profile(data: Any) -> LegacyProfile:
    if not isinstance(data, dict) or not data:
        return LegacyProfile()

    people = _dicts(data.get("people"))
    cases = _dicts(data.get("cases"))
    index = build_people_index(people)

    indicators = {key: False for key in INDICATOR_LABELS}

    indicators["person_missing_name"] = any(
        not str(p.get("name") or "").strip() and composite_name(p) for p in people
    )
    indicators["case_missing_client_name"] = any(
        client_name_candidate(c, index, people) for c in cases
    )
    indicators["numeric_ids"] = any(
        is_number(r.get("id")) for key in COLLECTIONS for r in _dicts(data.get(key))
    )
    indicators["case_person_id_numeric"] = any(_has_numeric_refs(c) for c in cases)
    indicators["has_master_case_number"] = any(
        c.get("masterCaseNumber") and not c.get("mcn") for c in cases
    )
    indicators["missing_financials"] = any(
        not isinstance(c.get("financials"), dict)
        or any(not isinstance(c["financials"].get(s), list) for s in FINANCIAL_SECTIONS)
        or c.get("authorizedReps") is None
        for c in cases
    )

    for case in cases:
        for item in _financial_items(case):
            if item.get("value") is not None and item.get("amount") is None:
                indicators["financial_value_field"] = True
            if item.get("type") and not item.get("description"):
                indicators["financial_type_without_description"] = True

    metadata = data.get("metadata")
    indicators["missing_metadata"] = not isinstance(metadata, dict) or not metadata.get("schemaVersion")

    summary = [INDICATOR_LABELS[key] for key, flagged in indicators.items() if flagged]
    return LegacyProfile(is_legacy=bool(summary), indicators=indicators, summary=summary)


__all__ = ["INDICATOR_LABELS", "LegacyProfile", "detect_legacy_profile"]
