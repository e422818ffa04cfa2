"""
Unit tests for AgentFactory.

Tests verify:
- Profile loading and validation
- Agent wiring with injected collaborators
- Adapter creation from settings
"""

from pathlib import Path

import pytest

from wordplay.application.factory import AgentFactory
from wordplay.core.domain.agent import WordPlayAgent
from wordplay.core.domain.context import AutonomyLevel
from wordplay.infrastructure.persistence.memory_storage import InMemoryStorage
from wordplay.infrastructure.research.web_research import WebResearchService

CONFIG_DIR = Path(__file__).parents[3] / "configs"


class TestAgentFactory:
    def test_factory_initialization(self):
        factory = AgentFactory(config_dir="configs")
        assert factory.config_dir == Path("configs")

    def test_load_profile_dev(self):
        config = AgentFactory(config_dir=str(CONFIG_DIR))._load_profile("dev")

        assert config["profile"] == "dev"
        assert config["agent"]["default_autonomy_level"] == "moderate"
        assert set(config["autonomy_levels"]) == {"conservative", "moderate", "aggressive"}

    def test_load_profile_not_found(self):
        with pytest.raises(FileNotFoundError, match="Profile not found"):
            AgentFactory(config_dir=str(CONFIG_DIR))._load_profile("nonexistent")

    def test_empty_profile_uses_defaults(self, tmp_path):
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")

        settings = AgentFactory(config_dir=str(tmp_path)).load_settings("empty")

        assert settings.default_autonomy_level == AutonomyLevel.MODERATE

    @pytest.mark.asyncio
    async def test_create_agent_with_injected_collaborators(
        self, tmp_path, mock_llm, mock_research, storage
    ):
        (tmp_path / "test.yaml").write_text(
            "agent:\n"
            "  default_autonomy_level: conservative\n"
            "  max_execution_seconds: 42\n"
            "  reflection_interval: 3\n"
            "  history_limit: 50\n",
            encoding="utf-8",
        )
        factory = AgentFactory(config_dir=str(tmp_path))

        agent = await factory.create_agent(
            profile="test", llm_provider=mock_llm, persistence=storage, research=mock_research
        )

        assert isinstance(agent, WordPlayAgent)
        assert len(agent.registry) == 31
        assert agent.persistence is storage
        assert agent.loop.max_execution_seconds == 42.0
        assert agent.loop.reflection_interval == 3
        context = agent.new_context(user_id=7)
        assert context.user_id == 7
        assert context.autonomy_level == AutonomyLevel.CONSERVATIVE
        assert context.history_limit == 50
        assert context.persistence is storage

    @pytest.mark.asyncio
    async def test_create_agent_missing_llm_config(self, tmp_path, storage, mock_research):
        (tmp_path / "test.yaml").write_text(
            f"llm:\n  config_path: {tmp_path / 'missing.yaml'}\n", encoding="utf-8"
        )

        with pytest.raises(FileNotFoundError):
            await AgentFactory(config_dir=str(tmp_path)).create_agent(
                profile="test", persistence=storage, research=mock_research
            )

    def test_create_adapters_from_settings(self, tmp_path):
        (tmp_path / "test.yaml").write_text(
            "research:\n  num_results: 2\n  timeout: 4\npersistence:\n  seed_user_id: 9\n",
            encoding="utf-8",
        )
        factory = AgentFactory(config_dir=str(tmp_path))
        settings = factory.load_settings("test")

        research = factory._create_research(settings)
        persistence = factory._create_persistence(settings)

        assert isinstance(research, WebResearchService)
        assert research.num_results == 2
        assert research.timeout == 4.0
        assert isinstance(persistence, InMemoryStorage)
