from __future__ import annotations

from .normalizer import (
    build_people_index,
    find_person_by_id,
    id_variants,
    normalize_id,
)
from .resolver import (
    NO_PERSON_ASSIGNED,
    PEOPLE_LOADING,
    UNLINKED_PERSON,
    derive_person_name,
    person_display_name,
    resolve_person,
)

__all__ = [
    "NO_PERSON_ASSIGNED",
    "PEOPLE_LOADING",
    "UNLINKED_PERSON",
    "build_people_index",
    "derive_person_name",
    "find_person_by_id",
    "id_variants",
    "normalize_id",
    "person_display_name",
    "resolve_person",
]
