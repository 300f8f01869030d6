"""Tests for config/settings: defaults, merge, env overrides for logging."""

import pytest

from zpages.config.settings import (
    get_logging_config,
    get_server_config,
    get_service_config,
    get_version_config,
    merged_config,
    read_config,
)


class TestDefaults:
    def test_defaults_present(self):
        cfg = merged_config({})
        assert cfg["server"]["port"] == 8080
        assert cfg["logging"]["level"] == "INFO"
        assert cfg["service"]["type"] == "application"

    def test_override_merges_nested(self):
        cfg = merged_config({"server": {"port": 9090}})
        assert cfg["server"]["port"] == 9090
        assert cfg["server"]["host"] == "0.0.0.0"

    def test_server_config(self):
        out = get_server_config({"server": {"host": "127.0.0.1", "port": "7070"}})
        assert out == {"host": "127.0.0.1", "port": 7070}


class TestServiceConfig:
    def test_explicit_identity(self):
        out = get_service_config(
            {"service": {"name": "data-store", "type": "platform", "guid": "abc", "uri": "http://ds:1"}}
        )
        assert out == {"name": "data-store", "type": "platform", "guid": "abc", "uri": "http://ds:1"}

    def test_uri_from_server_when_empty(self):
        out = get_service_config({"server": {"host": "10.0.0.5", "port": 8081}})
        assert out["uri"] == "http://10.0.0.5:8081"
        assert out["guid"] is None

    def test_uri_uses_hostname_for_wildcard(self, monkeypatch):
        monkeypatch.setattr("zpages.config.settings.socket.gethostname", lambda: "pod-1")
        out = get_service_config({})
        assert out["uri"] == "http://pod-1:8080"


class TestLoggingConfig:
    def test_section_values(self):
        out = get_logging_config({"logging": {"level": "DEBUG", "format": "json", "debug": 2}}, environ={})
        assert out == {"level": "DEBUG", "format": "json", "debug": 2}

    def test_env_overrides(self):
        env = {"LOGLEVEL": "WARNING", "LOGAS": "json", "DEBUGLEVEL": "3"}
        out = get_logging_config({"logging": {"level": "DEBUG", "format": "text", "debug": 0}}, environ=env)
        assert out == {"level": "WARNING", "format": "json", "debug": 3}

    def test_bad_debuglevel_is_zero(self, log_context, caplog):
        out = get_logging_config({}, environ={"DEBUGLEVEL": "verbose"})
        assert out["debug"] == 0
        assert any("DEBUGLEVEL" in r.getMessage() for r in caplog.records)


def test_version_config_defaults():
    out = get_version_config({})
    assert out["module"] == "zpages"
    assert out["version"] is None
    assert "fastapi" in out["dependencies"]


def test_read_config_from_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("service:\n  name: orders\nserver:\n  port: 9000\n", encoding="utf-8")
    cfg, resolved = read_config(str(path))
    assert resolved == str(path.resolve())
    assert cfg["service"]["name"] == "orders"
    assert cfg["server"]["port"] == 9000
    assert cfg["logging"]["format"] == "text"


def test_read_config_missing_file_uses_defaults(tmp_path):
    cfg, resolved = read_config(str(tmp_path / "missing.yaml"))
    assert resolved is None
    assert cfg["server"]["port"] == 8080
