"""
Collection-preserving merge for partial document updates.

A partial update that omits ``people``/``cases``/``organizations`` (or sends
them as None) must not wipe the collection from the document. An explicit
list, including an empty one, replaces the previous value.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

PRESERVED_KEYS = ("people", "cases", "organizations")


def safe_merge(prev: Optional[Dict[str, Any]], partial: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(prev, dict):
        return partial if isinstance(partial, dict) else {}
    if not isinstance(partial, dict):
        return dict(prev)

    result = {**prev, **partial}

    for key in PRESERVED_KEYS:
        if prev.get(key) and partial.get(key) is None:
            result[key] = prev[key]

    return result


__all__ = ["PRESERVED_KEYS", "safe_merge"]
