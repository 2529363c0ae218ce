from __future__ import annotations

from .avs import DEFAULT_ACCOUNT_TYPES, compare_with_existing, parse_avs_account_block, parse_avs_data
from .items import (
    add_financial_items,
    group_by_owner,
    is_simp_case,
    remove_financial_item,
    transform_financial_items,
)

__all__ = [
    "DEFAULT_ACCOUNT_TYPES",
    "add_financial_items",
    "compare_with_existing",
    "group_by_owner",
    "is_simp_case",
    "parse_avs_account_block",
    "parse_avs_data",
    "remove_financial_item",
    "transform_financial_items",
]
