import json

import pytest

from pms_monitoring.config import ConfigurationError
from pms_monitoring.registry import (
    ServiceRegistry,
    ServiceTarget,
    load_service_registry,
    parse_service_pairs,
)


def _write_services(path, services):
    path.write_text(json.dumps({"services": services}))
    return path


def test_registry_preserves_order_and_lookup():
    registry = ServiceRegistry([ServiceTarget("a", "http://a"), ServiceTarget("b", "http://b")])

    assert registry.names == ("a", "b")
    assert len(registry) == 2
    assert "a" in registry
    assert registry.get("b") == ServiceTarget("b", "http://b")
    assert registry.get("missing") is None


def test_registry_rejects_duplicates():
    with pytest.raises(ConfigurationError, match="more than once"):
        ServiceRegistry([ServiceTarget("a", "http://a"), ServiceTarget("a", "http://other")])


def test_registry_rejects_empty_and_blank_entries():
    with pytest.raises(ConfigurationError):
        ServiceRegistry([])
    with pytest.raises(ConfigurationError):
        ServiceRegistry([ServiceTarget("", "http://a")])
    with pytest.raises(ConfigurationError):
        ServiceRegistry([ServiceTarget("a", "")])


def test_service_target_is_immutable():
    target = ServiceTarget("a", "http://a")

    with pytest.raises(AttributeError):
        target.url = "http://b"  # type: ignore[misc]


def test_load_from_json_file(tmp_path):
    path = _write_services(
        tmp_path / "services.json",
        [{"name": "core", "url": "http://localhost:3000/health"}, {"name": "admin", "url": "http://localhost:3010"}],
    )

    registry = load_service_registry(path)

    assert registry.names == ("core", "admin")
    assert registry.source == str(path)


def test_environment_overrides_file(monkeypatch, tmp_path):
    path = _write_services(tmp_path / "services.json", [{"name": "core", "url": "http://core"}])
    monkeypatch.setenv("MONITORED_SERVICES", "api=http://api/health, web=http://web")

    registry = load_service_registry(path)

    assert registry.targets == (ServiceTarget("api", "http://api/health"), ServiceTarget("web", "http://web"))


def test_missing_file_without_env_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError, match="MONITORED_SERVICES"):
        load_service_registry(tmp_path / "absent.json")


def test_malformed_entries_are_rejected(tmp_path):
    path = _write_services(tmp_path / "services.json", [{"name": "core"}])

    with pytest.raises(ConfigurationError):
        load_service_registry(path)


def test_services_key_must_be_list(tmp_path):
    path = tmp_path / "services.json"
    path.write_text('{"services": {"name": "core"}}')

    with pytest.raises(ConfigurationError, match="must be a list"):
        load_service_registry(path)


def test_invalid_json_is_configuration_error(tmp_path):
    path = tmp_path / "services.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_service_registry(path)


def test_parse_service_pairs_requires_separator():
    with pytest.raises(ConfigurationError, match="name=url"):
        parse_service_pairs(["core-http://core"], "MONITORED_SERVICES")


def test_bundled_services_file_lists_default_fleet():
    from pathlib import Path

    bundled = Path(__file__).resolve().parents[2] / "config" / "services.json"

    registry = load_service_registry(bundled)

    assert registry.names == ("backend", "core", "admin", "guest", "staff", "marketplace", "gateway")
