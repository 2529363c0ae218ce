"""
Financial line items on cases: import transformation, add/remove, and the
SIMP owner partition.

Mutations never edit the document in place; they build new case and
document revisions and merge them with ``safe_merge``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from nightingale_cms.identity.normalizer import normalize_id
from nightingale_cms.logging import get_logger
from nightingale_cms.merge import safe_merge
from nightingale_cms.migration.transforms import FINANCIAL_SECTIONS

log = get_logger(__name__)

OWNERS = ("applicant", "joint", "spouse")
DEFAULT_OWNER = "applicant"
SIMP_CASE_TYPE = "SIMP"


def generate_item_id(prefix: str = "financial") -> str:
    return f"{prefix}-{uuid.uuid4()}"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _description(item: Dict[str, Any]) -> str:
    if item.get("description"):
        return item["description"]
    if item.get("type") and item.get("location"):
        return f"{item['type']} - {item['location']}"
    if item.get("type"):
        return item["type"]
    return "Unknown Item"


def transform_financial_items(imported: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Map imported (AVS or legacy) rows onto the financial item shape."""
    out: List[Dict[str, Any]] = []
    for item in imported:
        note = "Imported from AVS" + (" (Potential Duplicate)" if item.get("isDuplicate") else "")
        owner = item.get("owner")
        out.append(
            {
                "id": generate_item_id(),
                "description": _description(item),
                "location": item.get("location") or "",
                "accountNumber": item.get("accountNumber") or "",
                "amount": item.get("amount") or item.get("value") or 0,
                "type": item.get("type") or "",
                "frequency": item.get("frequency") or "monthly",
                # AVS owner text is a display list of names, not an owner category
                "owner": owner if owner in OWNERS else DEFAULT_OWNER,
                "verificationStatus": item.get("verificationStatus") or "Verified",
                "verificationSource": item.get("verificationSource") or item.get("source") or "AVS Import",
                "source": item.get("source") or "AVS Import",
                "notes": item.get("notes") or note,
                "dateAdded": item.get("dateAdded") or _now(),
            }
        )
    return out


def is_simp_case(case: Dict[str, Any]) -> bool:
    app_details = case.get("appDetails") if isinstance(case.get("appDetails"), dict) else {}
    case_type = app_details.get("caseType") or case.get("caseType")
    return str(case_type or "").upper() == SIMP_CASE_TYPE


def group_by_owner(items: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """SIMP layout: items bucketed by owner; unknown owners count as applicant."""
    groups: Dict[str, List[Dict[str, Any]]] = {owner: [] for owner in OWNERS}
    for item in items or []:
        if not isinstance(item, dict):
            continue
        owner = item.get("owner")
        groups[owner if owner in OWNERS else DEFAULT_OWNER].append(item)
    return groups


# -----------------------------
# Document mutations
# -----------------------------

def _check_section(section: str) -> None:
    if section not in FINANCIAL_SECTIONS:
        raise ValueError(f"Unknown financial section {section!r}; expected one of {FINANCIAL_SECTIONS}")


def _replace_case(doc: Dict[str, Any], case_id: Any, edit) -> Dict[str, Any]:
    wanted = normalize_id(case_id)
    cases = doc.get("cases") if isinstance(doc.get("cases"), list) else []

    found = False
    new_cases = []
    for case in cases:
        if not found and isinstance(case, dict) and normalize_id(case.get("id")) == wanted:
            new_cases.append(edit(case))
            found = True
        else:
            new_cases.append(case)

    if not found:
        raise KeyError(f"Case not found: {case_id!r}")
    return safe_merge(doc, {"cases": new_cases})


def _section_items(case: Dict[str, Any], section: str) -> List[Any]:
    financials = case.get("financials") if isinstance(case.get("financials"), dict) else {}
    items = financials.get(section)
    return items if isinstance(items, list) else []


def _with_section(case: Dict[str, Any], section: str, items: List[Dict[str, Any]]) -> Dict[str, Any]:
    financials = case.get("financials") if isinstance(case.get("financials"), dict) else {}
    return {**case, "financials": {**financials, section: items}}


def add_financial_items(
    doc: Dict[str, Any],
    case_id: Any,
    section: str,
    items: Iterable[Dict[str, Any]],
) -> Dict[str, Any]:
    """New document revision with ``items`` appended to the case's section."""
    _check_section(section)
    items = list(items)

    def edit(case: Dict[str, Any]) -> Dict[str, Any]:
        current = _section_items(case, section)
        return _with_section(case, section, list(current) + items)

    log.info("Adding %d %s item(s) to case %s", len(items), section, case_id)
    return _replace_case(doc, case_id, edit)


def remove_financial_item(
    doc: Dict[str, Any],
    case_id: Any,
    section: str,
    item_id: Any,
) -> Dict[str, Any]:
    """New document revision without the item; unknown item ids change nothing."""
    _check_section(section)
    wanted = normalize_id(item_id)

    def edit(case: Dict[str, Any]) -> Dict[str, Any]:
        current = _section_items(case, section)
        kept = [i for i in current if not (isinstance(i, dict) and normalize_id(i.get("id")) == wanted)]
        return _with_section(case, section, kept)

    return _replace_case(doc, case_id, edit)


__all__ = [
    "DEFAULT_OWNER",
    "OWNERS",
    "SIMP_CASE_TYPE",
    "add_financial_items",
    "generate_item_id",
    "group_by_owner",
    "is_simp_case",
    "remove_financial_item",
    "transform_financial_items",
]
