"""
Unit tests for bootstrap/config.py and bootstrap/app.py

Tests configuration loading and registry construction.
"""

import json
import logging
from unittest.mock import patch

import pytest

from metadep.bootstrap import (
    LoggingConfig,
    MetadepConfig,
    RegistryConfig,
    build_registry,
    configure_logging,
    load_config,
)
from metadep.dependencies import MetadataDependencyRegistry
from metadep.errors import ConfigurationError, ErrorCode
from metadep.identifiers import IdentifierScheme

ENV_VARS = (
    "METADEP_ENVIRONMENT",
    "METADEP_TRACE_LEVEL",
    "METADEP_MAX_DEPTH",
    "METADEP_RECORD_NOTIFICATIONS",
    "METADEP_NOTIFICATION_LOG_SIZE",
    "METADEP_LOG_LEVEL",
    "METADEP_LOG_FORMAT",
    "METADEP_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment and working directory."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    """Test default values."""

    def test_registry_defaults(self):
        config = RegistryConfig()
        assert config.trace_level == 0
        assert config.max_depth == 256
        assert config.record_notifications is False
        assert config.notification_log_size == 10000

    def test_from_env_without_variables(self):
        config = MetadepConfig.from_env()
        assert config.environment == "development"
        assert config.registry == RegistryConfig()
        assert config.logging == LoggingConfig()


class TestFromEnv:
    """Test METADEP_* environment variables."""

    def test_registry_variables(self, monkeypatch):
        monkeypatch.setenv("METADEP_TRACE_LEVEL", "2")
        monkeypatch.setenv("METADEP_MAX_DEPTH", "32")
        monkeypatch.setenv("METADEP_RECORD_NOTIFICATIONS", "True")
        monkeypatch.setenv("METADEP_NOTIFICATION_LOG_SIZE", "50")

        config = RegistryConfig.from_env()

        assert config.trace_level == 2
        assert config.max_depth == 32
        assert config.record_notifications is True
        assert config.notification_log_size == 50

    def test_blank_max_depth_disables_guard(self, monkeypatch):
        monkeypatch.setenv("METADEP_MAX_DEPTH", "")
        assert RegistryConfig.from_env().max_depth is None

    def test_logging_variables(self, monkeypatch):
        monkeypatch.setenv("METADEP_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("METADEP_LOG_FILE", "/tmp/metadep.log")

        config = LoggingConfig.from_env()

        assert config.level == "DEBUG"
        assert config.log_file == "/tmp/metadep.log"

    def test_environment_name(self, monkeypatch):
        monkeypatch.setenv("METADEP_ENVIRONMENT", "production")
        assert MetadepConfig.from_env().environment == "production"


class TestFromFile:
    """Test JSON configuration files."""

    def test_file_overrides_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("METADEP_TRACE_LEVEL", "1")
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({
            "environment": "test",
            "registry": {"max_depth": 8, "record_notifications": True},
            "logging": {"level": "WARNING"},
        }))

        config = MetadepConfig.from_file(str(path))

        assert config.environment == "test"
        assert config.registry.trace_level == 1
        assert config.registry.max_depth == 8
        assert config.registry.record_notifications is True
        assert config.logging.level == "WARNING"

    def test_unknown_keys_warn(self, tmp_path, caplog):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"registry": {"thread_safe": True}}))

        with caplog.at_level(logging.WARNING):
            config = MetadepConfig.from_file(str(path))

        assert "thread_safe" in caplog.text
        assert not hasattr(config.registry, "thread_safe")

    def test_missing_file_falls_back_to_env(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            config = MetadepConfig.from_file(str(tmp_path / "absent.json"))

        assert config == MetadepConfig.from_env()
        assert "not found" in caplog.text

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError) as exc_info:
            MetadepConfig.from_file(str(path))

        assert exc_info.value.code == ErrorCode.CFG_INVALID

    def test_to_dict_round_trips_through_file(self, tmp_path):
        original = MetadepConfig(environment="staging")
        original.registry.trace_level = 1
        path = tmp_path / "saved.json"
        path.write_text(json.dumps(original.to_dict()))

        assert MetadepConfig.from_file(str(path)) == original

    def test_string_values_converted(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({
            "registry": {
                "trace_level": "2",
                "max_depth": "16",
                "record_notifications": "true",
                "notification_log_size": "500",
            },
        }))

        config = MetadepConfig.from_file(str(path))
        config.validate()

        assert config.registry.trace_level == 2
        assert config.registry.max_depth == 16
        assert config.registry.record_notifications is True
        assert config.registry.notification_log_size == 500

    def test_null_max_depth_disables_guard(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"registry": {"max_depth": None}}))

        assert MetadepConfig.from_file(str(path)).registry.max_depth is None

    @pytest.mark.parametrize("settings", [
        {"trace_level": "verbose"},
        {"trace_level": None},
        {"notification_log_size": [10]},
        {"max_depth": True},
    ])
    def test_wrongly_typed_values_rejected(self, tmp_path, settings):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"registry": settings}))

        with pytest.raises(ConfigurationError) as exc_info:
            MetadepConfig.from_file(str(path))

        assert exc_info.value.code == ErrorCode.CFG_INVALID



class TestValidation:
    """Test validate() and load_config()."""

    @pytest.mark.parametrize("field,value", [
        ("trace_level", -1),
        ("max_depth", -5),
        ("notification_log_size", 0),
    ])
    def test_invalid_registry_values(self, field, value):
        config = RegistryConfig(**{field: value})
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_zero_max_depth_is_allowed(self):
        RegistryConfig(max_depth=0).validate()

    def test_unknown_log_level(self):
        with pytest.raises(ConfigurationError):
            LoggingConfig(level="CHATTY").validate()

    def test_load_config_uses_default_path(self, tmp_path):
        (tmp_path / "metadep.json").write_text(json.dumps({"environment": "local"}))

        assert load_config().environment == "local"

    def test_load_config_without_files(self):
        assert load_config() == MetadepConfig.from_env()

    def test_load_config_validates(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"registry": {"trace_level": -1}}))

        with pytest.raises(ConfigurationError):
            load_config(str(path))


class TestBuildRegistry:
    """Test registry construction from configuration."""

    def test_build_with_defaults(self):
        registry = build_registry()

        assert isinstance(registry, MetadataDependencyRegistry)
        assert registry.notification_log is None
        assert registry.dispatcher.max_depth == 256
        assert registry.dispatcher.trace_level == 0

    def test_build_from_config(self):
        config = MetadepConfig()
        config.registry.trace_level = 1
        config.registry.max_depth = None
        config.registry.record_notifications = True
        config.registry.notification_log_size = 20

        registry = build_registry(config)

        assert registry.dispatcher.trace_level == 1
        assert registry.dispatcher.max_depth is None
        assert registry.notification_log is not None
        assert registry.notification_log.max_records == 20

    def test_build_with_scheme(self):
        scheme = IdentifierScheme(
            class_of=lambda i: i.split("/")[0],
            is_class_level=lambda i: "/" not in i,
            is_valid=lambda i: isinstance(i, str) and bool(i.strip()),
        )

        registry = build_registry(MetadepConfig(), scheme=scheme)

        assert registry.graph.scheme is scheme

    def test_build_rejects_invalid_config(self):
        config = MetadepConfig()
        config.registry.trace_level = -1

        with pytest.raises(ConfigurationError):
            build_registry(config)


class TestConfigureLogging:
    """Test root logger setup."""

    def test_stream_only(self):
        with patch("logging.basicConfig") as basic_config:
            configure_logging(LoggingConfig(level="debug"))

        captured = basic_config.call_args.kwargs
        assert captured["level"] == "DEBUG"
        assert captured["force"] is True
        assert len(captured["handlers"]) == 1

    def test_with_log_file(self, tmp_path):
        with patch("logging.basicConfig") as basic_config:
            configure_logging(LoggingConfig(log_file=str(tmp_path / "metadep.log")))

        handlers = basic_config.call_args.kwargs["handlers"]
        assert len(handlers) == 2
        assert isinstance(handlers[1], logging.FileHandler)
        for handler in handlers:
            handler.close()
