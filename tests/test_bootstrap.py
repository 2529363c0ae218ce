import json
import logging
import threading

from nightingale_cms.services import bootstrap
from nightingale_cms.services.bootstrap import DataInitializer, init_data, reset_init_data
from nightingale_cms.services.data_service import JsonFileDataService, OperationResult


LEGACY = {
    "people": [{"id": 1, "firstName": "Jane", "lastName": "Doe"}],
    "cases": [{"id": "c1", "personId": 1}],
    "organizations": [],
}


def _service(tmp_path, data):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return JsonFileDataService(path), path


def test_legacy_data_is_migrated_and_persisted(tmp_path):
    service, path = _service(tmp_path, LEGACY)

    result = DataInitializer(service, apply_fixes=True).run()

    assert result.success
    assert result.migrated
    assert result.data["cases"][0]["clientName"] == "Jane Doe"
    assert result.migration_report.changes["person_names"] == ["1"]

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["people"][0]["name"] == "Jane Doe"


def test_current_data_is_not_migrated(tmp_path):
    service, _ = _service(tmp_path, LEGACY)
    DataInitializer(service, apply_fixes=True).run()

    again = DataInitializer(JsonFileDataService(service.path), apply_fixes=True).run()

    assert again.success
    assert not again.migrated


def test_migration_failure_falls_back_to_original(tmp_path, caplog):
    service, path = _service(tmp_path, LEGACY)
    before = path.read_text(encoding="utf-8")

    def broken_migration(data, apply_fixes=True):
        raise RuntimeError("migration exploded")

    logger = logging.getLogger("test.bootstrap")
    with caplog.at_level(logging.WARNING, logger="test.bootstrap"):
        result = DataInitializer(service, migrate=broken_migration, logger=logger).run()

    assert result.success
    assert not result.migrated
    assert result.data["people"][0]["id"] == 1
    assert path.read_text(encoding="utf-8") == before
    assert "migration_bootstrap_failed" in caplog.text


def test_initialize_failure_is_reported(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("[broken", encoding="utf-8")

    result = DataInitializer(JsonFileDataService(path)).run()

    assert not result.success
    assert result.error


def test_bootstrap_runs_once_for_concurrent_callers(tmp_path):
    service, _ = _service(tmp_path, LEGACY)
    calls = []
    real_initialize = service.initialize

    def counting_initialize():
        calls.append(1)
        return real_initialize()

    service.initialize = counting_initialize
    initializer = DataInitializer(service, apply_fixes=True)

    results = []
    threads = [threading.Thread(target=lambda: results.append(initializer.run())) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert len(results) == 5
    assert all(r is results[0] for r in results)

    initializer.reset()
    initializer.run()
    assert len(calls) == 2


def test_module_level_init_data_is_memoized(tmp_path):
    service, _ = _service(tmp_path, LEGACY)
    reset_init_data()
    try:
        first = init_data(service)
        second = init_data()
        assert first is second
        assert bootstrap._initializer is not None
    finally:
        reset_init_data()


def test_empty_document_flows_through(tmp_path):
    service, _ = _service(tmp_path, {})

    result = DataInitializer(service).run()

    assert result.success
    assert result.data == {}
    assert not result.migrated


def test_failed_persist_falls_back_to_original(tmp_path, caplog):
    service, path = _service(tmp_path, LEGACY)
    before = path.read_text(encoding="utf-8")

    def failing_write(data):
        return OperationResult(success=False, error="disk full")

    service.write_data = failing_write

    logger = logging.getLogger("test.bootstrap.persist")
    with caplog.at_level(logging.WARNING, logger="test.bootstrap.persist"):
        result = DataInitializer(service, logger=logger, apply_fixes=True).run()

    assert result.success
    assert not result.migrated
    assert result.data["people"][0]["id"] == 1
    assert "name" not in result.data["people"][0]
    assert path.read_text(encoding="utf-8") == before
    assert "migration_bootstrap_failed" in caplog.text
    assert "disk full" in caplog.text
