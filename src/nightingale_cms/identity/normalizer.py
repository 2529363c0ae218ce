"""
Identifier normalization and the people variant index.

Person and case ids arrive as strings or numbers, sometimes zero-padded by
older exports ("05") and sometimes not ("5"). Everything that compares ids
goes through ``normalize_id`` first; lookups that must tolerate padding
differences go through ``build_people_index``.

The index is a derived cache: rebuild it from the current ``people`` list
whenever that list changes. It is never persisted.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from nightingale_cms.logging import get_logger

log = get_logger(__name__)

# Zero-width characters that survive copy/paste from spreadsheets
_INVISIBLE = "\u200b\u200c\u200d\u2060\ufeff"
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


# -----------------------------
# Canonical forms
# -----------------------------

def normalize_id(raw: Any) -> str:
    """
    Canonical string form of an identifier.

    Returns "" for None, booleans, and blank strings; never raises.
    Integral floats lose their fractional part so 5 and 5.0 agree.
    """
    if raw is None or isinstance(raw, bool):
        return ""

    if isinstance(raw, int):
        return str(raw)

    if isinstance(raw, float):
        if raw != raw or raw in (float("inf"), float("-inf")):
            return ""
        return str(int(raw)) if raw.is_integer() else repr(raw)

    text = str(raw)
    for ch in _INVISIBLE:
        text = text.replace(ch, "")
    return text.strip()


def strip_leading_zeros(value: str) -> str:
    """'007' -> '7'; '000' falls back to the original value."""
    return value.lstrip("0") or value


def numeric_form(value: str) -> Optional[str]:
    """
    Decimal string form of ``value`` when it parses as a decimal number.

    '7' -> '7', '7.0' -> '7', '1e3' -> '1000', 'A7' -> None.
    """
    if not value or not _DECIMAL_RE.match(value):
        return None

    if value.lstrip("+-").isdigit():
        return str(int(value))

    number = float(value)
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return str(int(number)) if number.is_integer() else repr(number)


def id_variants(raw: Any) -> List[str]:
    """
    Ordered, de-duplicated lookup variants of an identifier:

      1) the normalized id
      2) the id padded to 2 digits
      3) the id with leading zeros stripped
      4) the stripped id re-padded to 2 digits
      5) the decimal numeric form of the stripped id, if any
    """
    key = normalize_id(raw)
    if not key:
        return []

    no_zeros = strip_leading_zeros(key)
    candidates = [
        key,
        key.rjust(2, "0"),
        no_zeros,
        no_zeros.rjust(2, "0"),
        numeric_form(no_zeros),
    ]

    out: List[str] = []
    for c in candidates:
        if c and c not in out:
            out.append(c)
    return out


# -----------------------------
# Index + linear lookup
# -----------------------------

def build_people_index(people: Any) -> Dict[str, Dict[str, Any]]:
    """
    Map every id variant of every person to that person.

    First writer wins: when two people share a variant, the earlier one keeps
    it and the later one stays reachable only through its other variants.
    Non-list input yields an empty index; ``None`` entries and entries without
    a usable id are skipped.
    """
    index: Dict[str, Dict[str, Any]] = {}
    if not isinstance(people, list):
        return index

    collisions = 0
    for person in people:
        if not isinstance(person, dict):
            continue
        for variant in id_variants(person.get("id")):
            if variant in index:
                if index[variant] is not person:
                    collisions += 1
                continue
            index[variant] = person

    if collisions:
        log.debug("People index built with %d variant collisions", collisions)
    return index


def _same_number(a: str, b: str) -> bool:
    na, nb = numeric_form(a), numeric_form(b)
    return na is not None and na == nb


def find_person_by_id(people: Optional[Iterable[Any]], person_id: Any) -> Optional[Dict[str, Any]]:
    """
    Linear scan with flexible matching, used when the index misses.

    Matches on exact string, 2-digit padding in either direction, or equal
    numeric value.
    """
    if not people or not person_id:
        return None

    wanted = normalize_id(person_id)
    if not wanted:
        return None

    for person in people:
        if not isinstance(person, dict):
            continue
        pid = normalize_id(person.get("id"))
        if not pid:
            continue
        if pid == wanted:
            return person
        if pid == wanted.rjust(2, "0") or pid.rjust(2, "0") == wanted:
            return person
        if _same_number(pid, wanted):
            return person
    return None


__all__ = [
    "normalize_id",
    "strip_leading_zeros",
    "numeric_form",
    "id_variants",
    "build_people_index",
    "find_person_by_id",
]
