import copy
import logging

import pytest

from nightingale_cms.core.exceptions import MigrationError
from nightingale_cms.integrity import analyze
from nightingale_cms.migration import detect_legacy_profile, run_full_migration
from nightingale_cms.migration import engine, transforms


LEGACY_SAMPLE = {
    "cases": [
        {
            "id": 1,
            "masterCaseNumber": "MCN-OLD-001",
            "personId": 10,
            "financials": {
                "resources": [
                    {"id": 5, "type": "Savings", "value": "1000"},
                    {"id": 6, "description": "Already Migrated", "amount": 200},
                ],
            },
        },
    ],
    "people": [
        {"id": 10, "firstName": "Jane", "lastName": "Doe"},
        {"id": "11", "name": "John Smith"},
    ],
    "organizations": [{"id": 100, "name": "Org"}],
    "settings": {"theme": "dark"},
}


def test_detect_flags_legacy_indicators():
    profile = detect_legacy_profile(LEGACY_SAMPLE)

    assert profile.is_legacy
    assert profile.indicators["has_master_case_number"]
    assert profile.indicators["numeric_ids"]
    assert profile.indicators["case_person_id_numeric"]
    assert profile.indicators["financial_value_field"]
    assert profile.indicators["financial_type_without_description"]
    assert profile.indicators["person_missing_name"]
    assert profile.indicators["case_missing_client_name"]
    assert profile.indicators["missing_metadata"]


def test_detect_does_not_mutate_input():
    snapshot = copy.deepcopy(LEGACY_SAMPLE)
    detect_legacy_profile(LEGACY_SAMPLE)
    assert LEGACY_SAMPLE == snapshot


def test_detect_empty_or_invalid_input():
    assert not detect_legacy_profile({}).is_legacy
    assert not detect_legacy_profile(None).is_legacy
    assert not detect_legacy_profile("data").is_legacy


def test_full_migration_transforms_legacy_sample():
    snapshot = copy.deepcopy(LEGACY_SAMPLE)
    result = run_full_migration(LEGACY_SAMPLE)
    data = result.migrated_data

    assert LEGACY_SAMPLE == snapshot

    case = data["cases"][0]
    assert case["id"] == "1"
    assert case["personId"] == "10"
    assert case["mcn"] == "MCN-OLD-001"
    assert case["clientName"] == "Jane Doe"
    assert case["authorizedReps"] == []
    assert case["financials"]["income"] == []
    assert case["financials"]["expenses"] == []

    savings = case["financials"]["resources"][0]
    assert savings["amount"] == 1000
    assert savings["description"] == "Savings"

    assert data["people"][0]["id"] == "10"
    assert data["people"][0]["name"] == "Jane Doe"
    assert data["people"][1]["name"] == "John Smith"
    assert data["organizations"][0]["id"] == "100"
    assert data["metadata"]["schemaVersion"] == 1


def test_full_migration_preserves_unrelated_keys():
    data = run_full_migration(LEGACY_SAMPLE).migrated_data
    assert data["settings"] == {"theme": "dark"}
    assert data["organizations"][0]["name"] == "Org"


def test_report_lists_changed_records_per_transform():
    report = run_full_migration(LEGACY_SAMPLE).report

    assert report.legacy_detected
    assert report.changes["person_names"] == ["10"]
    assert report.changes["case_client_names"] == ["1"]
    assert report.changes["master_case_number"] == ["1"]
    assert report.changes["metadata"] == ["metadata"]
    assert report.counts["before"] == report.counts["after"]
    assert report.warnings["orphan_case_person_ids"] == []


def test_migration_is_idempotent():
    first = run_full_migration(LEGACY_SAMPLE)
    second = run_full_migration(first.migrated_data)

    assert second.report.changes == {}
    assert not second.report.changed
    assert second.migrated_data == first.migrated_data
    assert not detect_legacy_profile(first.migrated_data).is_legacy


def test_idempotent_on_edge_shapes():
    doc = {
        "people": [None, {"id": "p1"}, {"id": 2.0, "firstName": " ", "lastName": "Solo"}],
        "cases": [
            {"id": "c1", "personId": "missing"},
            {"id": "c2", "personId": 2, "financials": {"income": [{"value": "n/a"}]}},
            "not a case",
        ],
    }
    first = run_full_migration(doc)
    assert run_full_migration(first.migrated_data).report.changes == {}
    assert first.migrated_data["cases"][1]["clientName"] == "Solo"
    assert first.report.warnings["orphan_case_person_ids"] == ["missing"]


def test_apply_fixes_false_skips_name_backfills():
    result = run_full_migration(LEGACY_SAMPLE, apply_fixes=False)

    assert "name" not in result.migrated_data["people"][0]
    assert "clientName" not in result.migrated_data["cases"][0]
    assert "person_names" not in result.report.applied_transforms
    assert result.migrated_data["cases"][0]["mcn"] == "MCN-OLD-001"


def test_end_to_end_backfill_then_clean_audit():
    doc = {
        "people": [{"id": "1", "firstName": "Jane", "lastName": "Doe"}],
        "cases": [{"id": "c1", "personId": "1"}],
    }
    migrated = run_full_migration(doc).migrated_data

    assert migrated["people"][0]["name"] == "Jane Doe"
    assert migrated["cases"][0]["clientName"] == "Jane Doe"
    assert not analyze(migrated).has_issues


def test_non_dict_document_raises_migration_error():
    with pytest.raises(MigrationError):
        run_full_migration(["not", "a", "document"])


def test_failing_transform_is_wrapped(monkeypatch):
    def boom(doc):
        raise RuntimeError("kaboom")

    broken = [engine.TRANSFORMS[0].__class__("broken", boom)]
    monkeypatch.setattr(engine, "TRANSFORMS", broken)

    with pytest.raises(MigrationError, match="broken failed"):
        run_full_migration({"people": []})


def test_non_object_financials_are_replaced_with_a_warning(monkeypatch, caplog):
    logger = logging.getLogger("test.transforms")
    monkeypatch.setattr(transforms, "log", logger)
    doc = {"cases": [{"id": "c1", "financials": [{"amount": 5}]}]}

    with caplog.at_level(logging.WARNING, logger="test.transforms"):
        changed = transforms.financial_structure(doc)

    assert changed == ["c1"]
    assert doc["cases"][0]["financials"] == {"resources": [], "income": [], "expenses": []}
    assert "non-object financials" in caplog.text
