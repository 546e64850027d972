"""Tests for EngineSettings."""
import pytest
from pydantic import ValidationError

from asyncfsm import EngineSettings, StateMachine, get_settings


class TestEngineSettings:
    def test_defaults(self):
        settings = EngineSettings()

        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.service_name == "asyncfsm"
        assert settings.trace_transitions is True
        assert settings.collect_metrics is False

    def test_from_env_mapping(self):
        settings = EngineSettings.from_env({
            "ASYNCFSM_LOG_LEVEL": "debug",
            "ASYNCFSM_LOG_FORMAT": "Console",
            "ASYNCFSM_SERVICE_NAME": "checkout",
            "ASYNCFSM_TRACE_TRANSITIONS": "off",
            "ASYNCFSM_COLLECT_METRICS": "yes",
        })

        assert settings.log_level == "DEBUG"
        assert settings.log_format == "console"
        assert settings.service_name == "checkout"
        assert settings.trace_transitions is False
        assert settings.collect_metrics is True

    def test_from_process_environment(self, monkeypatch):
        monkeypatch.setenv("ASYNCFSM_SERVICE_NAME", "from-env")
        monkeypatch.setenv("ASYNCFSM_COLLECT_METRICS", "1")

        settings = EngineSettings.from_env()

        assert settings.service_name == "from-env"
        assert settings.collect_metrics is True

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            EngineSettings(log_level="chatty")
        with pytest.raises(ValidationError):
            EngineSettings.from_env({"ASYNCFSM_LOG_FORMAT": "xml"})

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_machine_uses_process_settings_by_default(self):
        assert StateMachine("m").settings is get_settings()
