"""Unit tests for profile settings parsing."""

import pytest

from wordplay.application.config import AgentSettings, parse_autonomy_profiles
from wordplay.core.domain.context import DEFAULT_AUTONOMY_PROFILES, AutonomyLevel, AutonomyProfile


class TestParseAutonomyProfiles:
    def test_empty_keeps_presets(self):
        assert parse_autonomy_profiles(None) == DEFAULT_AUTONOMY_PROFILES

    def test_partial_override(self):
        profiles = parse_autonomy_profiles({"aggressive": {"reflection_enabled": True}})

        assert profiles[AutonomyLevel.AGGRESSIVE] == AutonomyProfile(50, 20, True)
        assert profiles[AutonomyLevel.MODERATE] == DEFAULT_AUTONOMY_PROFILES[AutonomyLevel.MODERATE]

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            parse_autonomy_profiles({"reckless": {"max_iterations": 100}})

    @pytest.mark.parametrize("value", [0, -1, "ten", True])
    def test_invalid_limits(self, value):
        with pytest.raises(ValueError, match="positive integer"):
            parse_autonomy_profiles({"moderate": {"max_iterations": value}})


class TestAgentSettings:
    def test_defaults_from_empty_config(self, monkeypatch):
        monkeypatch.delenv("WORDPLAY_LLM_CONFIG", raising=False)

        settings = AgentSettings.from_dict({})

        assert settings.llm_config_path == "configs/llm_config.yaml"
        assert settings.default_autonomy_level == AutonomyLevel.MODERATE
        assert settings.max_execution_seconds == 300.0
        assert settings.reflection_interval == 5
        assert settings.history_limit == 100
        assert settings.seed_user_id == 1

    def test_values_from_config(self, monkeypatch):
        monkeypatch.delenv("WORDPLAY_LLM_CONFIG", raising=False)

        settings = AgentSettings.from_dict(
            {
                "llm": {"config_path": "other.yaml"},
                "agent": {"default_autonomy_level": "conservative", "max_execution_seconds": 60},
                "research": {"num_results": 3, "timeout": 5},
                "persistence": {"seed_user_id": None},
            }
        )

        assert settings.llm_config_path == "other.yaml"
        assert settings.default_autonomy_level == AutonomyLevel.CONSERVATIVE
        assert settings.max_execution_seconds == 60.0
        assert settings.research_num_results == 3
        assert settings.research_timeout == 5.0
        assert settings.seed_user_id is None

    def test_env_overrides_llm_config(self, monkeypatch):
        monkeypatch.setenv("WORDPLAY_LLM_CONFIG", "/etc/wordplay/llm.yaml")
        settings = AgentSettings.from_dict({"llm": {"config_path": "other.yaml"}})
        assert settings.llm_config_path == "/etc/wordplay/llm.yaml"

    def test_non_positive_budget(self):
        with pytest.raises(ValueError, match="max_execution_seconds"):
            AgentSettings.from_dict({"agent": {"max_execution_seconds": 0}})

    def test_unknown_default_level(self):
        with pytest.raises(ValueError):
            AgentSettings.from_dict({"agent": {"default_autonomy_level": "wild"}})
