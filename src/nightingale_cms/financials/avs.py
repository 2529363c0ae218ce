"""
AVS (Asset Verification System) report parsing.

An AVS dump is pasted text with one block per account, each block starting
with ``Account Owner: ``:

    Account Owner: JANE DOE; JOHN DOE Checking Account
    FIRST BANK - (123456789)
    Balance as of 01/31/2024 - $1,234.56

Parsed rows carry the legacy field names (``type``, ``value``, ``location``)
that ``transform_financial_items`` maps onto financial items.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from nightingale_cms.identity.normalizer import normalize_id

DEFAULT_ACCOUNT_TYPES = [
    "Checking Account",
    "Savings Account",
    "Money Market Account",
    "Certificate of Deposit",
    "Investment Account",
    "Retirement Account",
    "Trust Account",
    "Joint Account",
]

BLOCK_SEPARATOR = "Account Owner: "

_BANK_RE = re.compile(r"(.+) - \(")
_ACCOUNT_NUMBER_RE = re.compile(r" - \((\d+)\)")
_BALANCE_RE = re.compile(r"Balance as of .* - (.*)", re.IGNORECASE)
_ACCOUNT_WORD_RE = re.compile(r" account", re.IGNORECASE)
_NON_NUMERIC_RE = re.compile(r"[^0-9.-]")


def _parse_balance(text: str) -> float:
    cleaned = _NON_NUMERIC_RE.sub("", text)
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_avs_account_block(
    block: str,
    known_account_types: Optional[Sequence[str]] = None,
    *,
    today: Optional[date] = None,
) -> Optional[Dict[str, Any]]:
    """Parse one account block; None when it has fewer than two lines."""
    if not block or not isinstance(block, str):
        return None

    lines = [line for line in block.split("\n") if line.strip()]
    if len(lines) < 2:
        return None

    first_line = lines[0].strip()
    account_type = "N/A"
    owners = first_line

    # Longest match first so "Checking Account" wins over "Checking"
    for candidate in sorted(known_account_types or [], key=len, reverse=True):
        if candidate and first_line.upper().endswith(candidate.upper()):
            account_type = candidate
            owners = first_line[: -len(candidate)].strip()
            break

    owner_list = ", ".join(o.strip() for o in owners.split(";") if o.strip())

    bank_line = lines[1]
    bank_match = _BANK_RE.search(bank_line)
    number_match = _ACCOUNT_NUMBER_RE.search(bank_line)

    account_number = number_match.group(1).strip() if number_match else "N/A"
    if account_number != "N/A" and len(account_number) > 4:
        account_number = account_number[-4:]

    balance_line = next((l for l in lines if "balance as of" in l.lower()), None)
    balance_match = _BALANCE_RE.search(balance_line) if balance_line else None

    as_of = (today or date.today()).strftime("%m/%d/%Y")

    return {
        "type": _ACCOUNT_WORD_RE.sub("", account_type, count=1).strip(),
        "owner": owner_list,
        "location": bank_match.group(1).strip() if bank_match else "N/A",
        "accountNumber": account_number,
        "value": _parse_balance(balance_match.group(1)) if balance_match else 0.0,
        "verificationStatus": "Verified",
        "source": f"AVS as of {as_of}",
    }


def parse_avs_data(
    raw_input: str,
    known_account_types: Optional[Sequence[str]] = None,
    *,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Parse a full AVS dump; unparseable blocks are dropped."""
    if not raw_input or not isinstance(raw_input, str) or not raw_input.strip():
        return []

    if known_account_types is None:
        known_account_types = DEFAULT_ACCOUNT_TYPES

    blocks = [b for b in raw_input.split(BLOCK_SEPARATOR) if b.strip()]
    parsed = (parse_avs_account_block(b, known_account_types, today=today) for b in blocks)
    return [p for p in parsed if p]


def compare_with_existing(
    parsed_accounts: Iterable[Dict[str, Any]],
    existing: Iterable[Dict[str, Any]],
    case_id: Any,
) -> List[Dict[str, Any]]:
    """
    Tag parsed accounts as new or duplicate against a case's existing resources.
    Duplicates share the account number and (case-insensitive) institution.
    """
    existing = [e for e in existing or [] if isinstance(e, dict)]
    case_key = normalize_id(case_id)

    out: List[Dict[str, Any]] = []
    for i, account in enumerate(parsed_accounts):
        location = str(account.get("location") or "").lower()
        match = next(
            (
                e
                for e in existing
                if e.get("accountNumber") == account.get("accountNumber")
                and str(e.get("location") or "").lower() == location
            ),
            None,
        )
        out.append(
            {
                **account,
                "id": f"avs-{case_key}-{i}",
                "isNew": match is None,
                "isDuplicate": match is not None,
                "existingItem": match,
                "importAction": "update" if match is not None else "create",
            }
        )
    return out


__all__ = [
    "BLOCK_SEPARATOR",
    "DEFAULT_ACCOUNT_TYPES",
    "compare_with_existing",
    "parse_avs_account_block",
    "parse_avs_data",
]
