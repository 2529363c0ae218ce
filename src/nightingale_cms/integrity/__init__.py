from __future__ import annotations

from .auditor import IntegrityDetails, IntegrityReport, IntegritySummary, analyze

__all__ = [
    "IntegrityDetails",
    "IntegrityReport",
    "IntegritySummary",
    "analyze",
]
