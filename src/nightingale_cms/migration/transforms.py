"""
Ordered, idempotent structural fixes for legacy Nightingale documents.

Each transform mutates the working copy it is given (the engine deep-copies
the caller's document first) and returns the ids of the records it changed.
Running a transform on its own output changes nothing and returns [].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from nightingale_cms.identity.normalizer import build_people_index, normalize_id
from nightingale_cms.identity.resolver import person_display_name, resolve_person
from nightingale_cms.logging import get_logger

log = get_logger(__name__)

SCHEMA_VERSION = 1
FINANCIAL_SECTIONS = ("resources", "income", "expenses")
COLLECTIONS = ("people", "cases", "organizations")


@dataclass(frozen=True)
class Transform:
    name: str
    apply: Callable[[Dict[str, Any]], List[str]]
    # Data fixes can be skipped with apply_fixes=False; structural steps always run
    is_fix: bool = False


# -----------------------------
# Helpers
# -----------------------------

def _records(doc: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = doc.get(key)
    if not isinstance(value, list):
        return []
    return [r for r in value if isinstance(r, dict)]


def record_label(record: Dict[str, Any]) -> str:
    return normalize_id(record.get("id")) or "<no id>"


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def composite_name(person: Dict[str, Any]) -> str:
    parts = [person.get("firstName"), person.get("lastName")]
    return " ".join(str(p).strip() for p in parts if p and str(p).strip())


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_amount(value: Any) -> Any:
    """'$1,000.50' -> 1000.5; numbers pass through; unparseable text is kept."""
    if is_number(value):
        return value
    if isinstance(value, str):
        cleaned = value.replace("$", "").replace(",", "").strip()
        try:
            number = float(cleaned)
        except ValueError:
            return value
        return int(number) if number.is_integer() else number
    return value


def client_name_candidate(case: Dict[str, Any], index, people) -> str:
    """Name a case would receive from its linked person, or ''."""
    if not _blank(case.get("clientName")) or not case.get("personId"):
        return ""
    person = resolve_person(index, people, case.get("personId"))
    return person_display_name(person) if person else ""


# -----------------------------
# Transforms
# -----------------------------

def stringify_ids(doc: Dict[str, Any]) -> List[str]:
    """Numeric record ids and case person references become strings."""
    changed: List[str] = []

    for key in COLLECTIONS:
        for record in _records(doc, key):
            if is_number(record.get("id")):
                record["id"] = normalize_id(record["id"])
                changed.append(record["id"])

    for case in _records(doc, "cases"):
        touched = False
        for ref in ("personId", "spouseId"):
            if is_number(case.get(ref)):
                case[ref] = normalize_id(case[ref])
                touched = True

        reps = case.get("authorizedReps")
        if isinstance(reps, list) and any(is_number(r) for r in reps):
            case["authorizedReps"] = [normalize_id(r) if is_number(r) else r for r in reps]
            touched = True

        label = record_label(case)
        if touched and label not in changed:
            changed.append(label)

    return changed


def master_case_number(doc: Dict[str, Any]) -> List[str]:
    """Legacy ``masterCaseNumber`` is copied to ``mcn``."""
    changed: List[str] = []
    for case in _records(doc, "cases"):
        if case.get("masterCaseNumber") and not case.get("mcn"):
            case["mcn"] = case["masterCaseNumber"]
            changed.append(record_label(case))
    return changed


def financial_structure(doc: Dict[str, Any]) -> List[str]:
    """Every case gets a financials block with all sections and an authorizedReps list."""
    changed: List[str] = []
    for case in _records(doc, "cases"):
        touched = False

        financials = case.get("financials")
        if not isinstance(financials, dict):
            if financials:
                log.warning(
                    "Case %s: replacing non-object financials (%s) with empty sections",
                    record_label(case),
                    type(financials).__name__,
                )
            case["financials"] = {section: [] for section in FINANCIAL_SECTIONS}
            touched = True
        else:
            for section in FINANCIAL_SECTIONS:
                if not isinstance(financials.get(section), list):
                    financials[section] = []
                    touched = True

        if case.get("authorizedReps") is None:
            case["authorizedReps"] = []
            touched = True

        if touched:
            changed.append(record_label(case))
    return changed


def financial_fields(doc: Dict[str, Any]) -> List[str]:
    """Financial items: legacy ``value`` -> ``amount`` and ``type`` -> ``description``."""
    changed: List[str] = []
    for case in _records(doc, "cases"):
        financials = case.get("financials")
        if not isinstance(financials, dict):
            continue

        touched = False
        for section in FINANCIAL_SECTIONS:
            for item in financials.get(section) or []:
                if not isinstance(item, dict):
                    continue
                if item.get("value") is not None and item.get("amount") is None:
                    item["amount"] = to_amount(item["value"])
                    touched = True
                if item.get("type") and not item.get("description"):
                    item["description"] = item["type"]
                    touched = True

        if touched:
            changed.append(record_label(case))
    return changed


def person_names(doc: Dict[str, Any]) -> List[str]:
    """Backfill ``Person.name`` from first + last name."""
    changed: List[str] = []
    for person in _records(doc, "people"):
        if not _blank(person.get("name")):
            continue
        composite = composite_name(person)
        if composite:
            person["name"] = composite
            changed.append(record_label(person))
    return changed


def case_client_names(doc: Dict[str, Any]) -> List[str]:
    """Backfill ``Case.clientName`` from the linked person's display name."""
    people = _records(doc, "people")
    index = build_people_index(people)

    changed: List[str] = []
    for case in _records(doc, "cases"):
        name = client_name_candidate(case, index, people)
        if name:
            case["clientName"] = name
            changed.append(record_label(case))
    return changed


def schema_metadata(doc: Dict[str, Any]) -> List[str]:
    """Stamp ``metadata.schemaVersion`` when absent."""
    metadata = doc.get("metadata")
    if not isinstance(metadata, dict):
        doc["metadata"] = {"schemaVersion": SCHEMA_VERSION}
        return ["metadata"]
    if not metadata.get("schemaVersion"):
        metadata["schemaVersion"] = SCHEMA_VERSION
        return ["metadata"]
    return []


TRANSFORMS: List[Transform] = [
    Transform("stringify_ids", stringify_ids),
    Transform("master_case_number", master_case_number),
    Transform("financial_structure", financial_structure),
    Transform("financial_fields", financial_fields),
    Transform("person_names", person_names, is_fix=True),
    Transform("case_client_names", case_client_names, is_fix=True),
    Transform("metadata", schema_metadata),
]


__all__ = [
    "FINANCIAL_SECTIONS",
    "SCHEMA_VERSION",
    "TRANSFORMS",
    "Transform",
    "case_client_names",
    "client_name_candidate",
    "composite_name",
    "financial_fields",
    "financial_structure",
    "master_case_number",
    "person_names",
    "schema_metadata",
    "stringify_ids",
    "to_amount",
]
