"""
Person resolution and display-name derivation for case records.

Resolution misses are not errors: they come back as ``None`` from
``resolve_person`` and as the ``UNLINKED_PERSON`` label from
``derive_person_name``.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from nightingale_cms.identity.normalizer import (
    find_person_by_id,
    normalize_id,
    numeric_form,
    strip_leading_zeros,
)

NO_PERSON_ASSIGNED = "No Person Assigned"
PEOPLE_LOADING = "(loading…)"
UNLINKED_PERSON = "Unlinked Person"


def resolve_person(
    index: Optional[Mapping[str, Dict[str, Any]]],
    people: Optional[Sequence[Any]],
    person_id: Any,
) -> Optional[Dict[str, Any]]:
    """
    Index probes in order: exact, zero-stripped, numeric string.
    Falls back to a linear scan of ``people`` when all probes miss.
    """
    if not person_id:
        return None

    key = normalize_id(person_id)
    if not key:
        return None

    if index:
        if key in index:
            return index[key]

        no_zeros = strip_leading_zeros(key)
        if no_zeros in index:
            return index[no_zeros]

        numeric = numeric_form(no_zeros)
        if numeric is not None and numeric in index:
            return index[numeric]

    return find_person_by_id(people, person_id)


def person_display_name(person: Optional[Mapping[str, Any]]) -> str:
    """``name``, else "first last" skipping blanks, else ""."""
    if not person:
        return ""

    name = person.get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()

    parts = [person.get("firstName"), person.get("lastName")]
    return " ".join(str(p).strip() for p in parts if p and str(p).strip())


def derive_person_name(
    person: Optional[Mapping[str, Any]],
    case_record: Optional[Mapping[str, Any]],
    people_loaded: bool,
    has_people: bool,
) -> str:
    """
    Display label for the person behind a case.

    Precedence:
      1) case has no personId      -> "No Person Assigned"
      2) people not loaded yet     -> "(loading…)"
      3) loaded but empty          -> "Unlinked Person"
      4) person unresolved         -> "Unlinked Person"
      5) person name / first+last / case clientName / "Unlinked Person"
    """
    case_record = case_record or {}

    if not case_record.get("personId"):
        return NO_PERSON_ASSIGNED
    if not people_loaded:
        return PEOPLE_LOADING
    if not has_people:
        return UNLINKED_PERSON
    if not person:
        return UNLINKED_PERSON

    client_name = case_record.get("clientName")
    if isinstance(client_name, str):
        client_name = client_name.strip()

    return person_display_name(person) or client_name or UNLINKED_PERSON


__all__ = [
    "NO_PERSON_ASSIGNED",
    "PEOPLE_LOADING",
    "UNLINKED_PERSON",
    "resolve_person",
    "person_display_name",
    "derive_person_name",
]
