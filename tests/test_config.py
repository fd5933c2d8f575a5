import json
import logging

import pytest

from shimtrace.config.loader import (
    DEFAULT_CONFIG,
    ConfigurationError,
    _load_from_file,
    apply_config,
    deep_merge,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("SHIMTRACE_"):
            monkeypatch.delenv(key)


def test_defaults():
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG

    config["instrumentation"]["mysql"]["peer_service"] = "changed"
    assert DEFAULT_CONFIG["instrumentation"]["mysql"]["peer_service"] is None


def test_yaml_file(tmp_path):
    path = tmp_path / "shimtrace.yaml"
    path.write_text("instrumentation:\n  mysql:\n    peer_service: orders-db\n")

    config = load_config(str(path))

    assert config["instrumentation"]["mysql"]["peer_service"] == "orders-db"
    assert config["instrumentation"]["mysql"]["enabled"] is True


def test_json_file(tmp_path):
    path = tmp_path / "shimtrace.json"
    path.write_text(json.dumps({"service": {"name": "checkout"}}))

    assert load_config(str(path))["service"]["name"] == "checkout"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "shimtrace.yaml"
    path.write_text("instrumentation:\n  kafka:\n    peer_service: from-file\n")
    monkeypatch.setenv("SHIMTRACE_INSTRUMENTATION__KAFKA__PEER_SERVICE", "from-env")
    monkeypatch.setenv("SHIMTRACE_INSTRUMENTATION__MYSQL__ALLOW_LEADING_WHITESPACE", "true")

    config = load_config(str(path))

    assert config["instrumentation"]["kafka"]["peer_service"] == "from-env"
    assert config["instrumentation"]["mysql"]["allow_leading_whitespace"] is True


def test_missing_file_falls_back_to_defaults(caplog):
    caplog.set_level(logging.WARNING)
    assert load_config("/nonexistent/shimtrace.yaml") == DEFAULT_CONFIG
    assert "Configuration file not found" in caplog.text


def test_unsupported_format(tmp_path):
    path = tmp_path / "shimtrace.ini"
    path.write_text("[x]")
    with pytest.raises(ConfigurationError, match="Unsupported configuration file format"):
        _load_from_file(str(path))


def test_malformed_yaml(tmp_path):
    path = tmp_path / "shimtrace.yaml"
    path.write_text("instrumentation: [unclosed")
    with pytest.raises(ConfigurationError):
        _load_from_file(str(path))


def test_deep_merge():
    assert deep_merge({"a": {"b": 1}}, {"a": {"c": 2}, "d": 3}) == {"a": {"b": 1, "c": 2}, "d": 3}


def test_apply_config_installs_instrumentations(tracer_provider):
    config = load_config()
    config["logging"]["enabled"] = False
    config["instrumentation"]["kafka"]["enabled"] = False
    config["instrumentation"]["mysql"]["peer_service"] = "orders-db"

    registry = apply_config(config, tracer_provider=tracer_provider)

    try:
        assert registry.get("mysql").installed
        assert registry.get("mysql").config["peer_service"] == "orders-db"
        assert not registry.get("kafka").installed
    finally:
        registry.uninstall_all()


def test_apply_config_with_tracing_disabled():
    config = load_config()
    config["logging"]["enabled"] = False
    config["tracing"]["enabled"] = False

    registry = apply_config(config)

    assert registry.names() == ["kafka", "mysql"]
    assert not registry.get("mysql").installed
