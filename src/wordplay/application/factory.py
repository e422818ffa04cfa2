"""
Application Layer - Agent Factory

Dependency injection factory wiring the core domain (registry, executor,
planner, reflector, synthesizer, autonomous loop) to infrastructure adapters
according to a configuration profile.

Key Responsibilities:
- Load configuration profiles (configs/<profile>.yaml)
- Instantiate infrastructure adapters (model service, storage, web research)
- Register the closed tool catalog
- Wire everything into a WordPlayAgent
"""

from pathlib import Path
from typing import Optional

import structlog
import yaml

from wordplay.application.config import DEFAULT_CONFIG_DIR, AgentSettings
from wordplay.core.domain.agent import WordPlayAgent
from wordplay.core.domain.orchestrator import AutonomousLoop
from wordplay.core.domain.planner import Planner
from wordplay.core.domain.reflector import Reflector
from wordplay.core.domain.synthesizer import Synthesizer
from wordplay.core.interfaces.llm import LLMProviderProtocol
from wordplay.core.interfaces.persistence import PersistenceProtocol
from wordplay.core.interfaces.research import WebResearchProtocol
from wordplay.core.tools.catalog import build_default_registry
from wordplay.core.tools.executor import ToolExecutor


class AgentFactory:
    """
    Factory for creating agents with dependency injection.

    Any collaborator passed explicitly wins over the one the profile would
    create, which is how tests substitute mocks.
    """

    def __init__(self, config_dir: str = DEFAULT_CONFIG_DIR):
        """
        Args:
            config_dir: Path to directory containing profile YAML files
        """
        self.config_dir = Path(config_dir)
        self.logger = structlog.get_logger().bind(component="agent_factory")

    async def create_agent(
        self,
        profile: str = "dev",
        llm_provider: Optional[LLMProviderProtocol] = None,
        persistence: Optional[PersistenceProtocol] = None,
        research: Optional[WebResearchProtocol] = None,
    ) -> WordPlayAgent:
        """
        Create a fully wired agent.

        Args:
            profile: Configuration profile name
            llm_provider: Override for the model service
            persistence: Override for the storage adapter
            research: Override for the web research adapter

        Returns:
            WordPlayAgent instance with injected dependencies

        Raises:
            FileNotFoundError: If profile YAML (or the LLM config it names) is missing
            ValueError: If configuration is invalid
        """
        settings = self.load_settings(profile)
        self.logger.info(
            "creating_agent",
            profile=profile,
            default_autonomy_level=settings.default_autonomy_level.value,
        )

        llm_provider = llm_provider or self._create_llm_provider(settings)
        persistence = persistence or self._create_persistence(settings)
        research = research or self._create_research(settings)

        registry = build_default_registry(persistence, research, llm_provider)
        tool_executor = ToolExecutor(registry)
        loop = AutonomousLoop(
            executor=tool_executor,
            planner=Planner(llm_provider, registry),
            reflector=Reflector(llm_provider),
            synthesizer=Synthesizer(llm_provider, registry),
            max_execution_seconds=settings.max_execution_seconds,
            reflection_interval=settings.reflection_interval,
        )

        self.logger.info("agent_created", tools=len(registry))
        return WordPlayAgent(
            registry=registry,
            tool_executor=tool_executor,
            loop=loop,
            persistence=persistence,
            autonomy_profiles=settings.autonomy_profiles,
            default_autonomy_level=settings.default_autonomy_level,
            history_limit=settings.history_limit,
        )

    def load_settings(self, profile: str) -> AgentSettings:
        return AgentSettings.from_dict(self._load_profile(profile))

    def _load_profile(self, profile: str) -> dict:
        """
        Load configuration profile from YAML file.

        Raises:
            FileNotFoundError: If profile YAML not found
        """
        profile_path = self.config_dir / f"{profile}.yaml"

        if not profile_path.exists():
            self.logger.error(
                "profile_not_found",
                profile=profile,
                path=str(profile_path),
                hint="Ensure profile YAML exists in configs directory",
            )
            raise FileNotFoundError(f"Profile not found: {profile_path}")

        with open(profile_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        self.logger.debug("profile_loaded", profile=profile, config_keys=list(config.keys()))
        return config

    def _create_llm_provider(self, settings: AgentSettings) -> LLMProviderProtocol:
        from wordplay.infrastructure.llm.llm_service import LLMService

        return LLMService(config_path=settings.llm_config_path)

    def _create_persistence(self, settings: AgentSettings) -> PersistenceProtocol:
        from wordplay.infrastructure.persistence.memory_storage import InMemoryStorage

        return InMemoryStorage(seed_user_id=settings.seed_user_id)

    def _create_research(self, settings: AgentSettings) -> WebResearchProtocol:
        from wordplay.infrastructure.research.web_research import WebResearchService

        return WebResearchService(
            num_results=settings.research_num_results, timeout=settings.research_timeout
        )
