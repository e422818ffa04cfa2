"""
Application Layer - Settings

Profile settings read from `configs/<profile>.yaml`, with environment
variables (and a `.env` file) for the values that differ per deployment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any

from dotenv import load_dotenv

from wordplay.core.domain.context import (
    DEFAULT_AUTONOMY_PROFILES,
    DEFAULT_HISTORY_LIMIT,
    AutonomyLevel,
    AutonomyProfile,
)

load_dotenv()

DEFAULT_PROFILE = os.getenv("WORDPLAY_PROFILE", "dev")
DEFAULT_CONFIG_DIR = os.getenv("WORDPLAY_CONFIG_DIR", "configs")


def _positive_int(section: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{section}.{key} must be a positive integer, got {value!r}")
    return value


def parse_autonomy_profiles(raw: dict[str, Any] | None) -> dict[AutonomyLevel, AutonomyProfile]:
    """
    Merge per-level overrides from YAML over the built-in presets.

    Raises:
        ValueError: On an unknown level name or a non-positive limit
    """
    profiles = dict(DEFAULT_AUTONOMY_PROFILES)
    for name, overrides in (raw or {}).items():
        level = AutonomyLevel(name)
        overrides = overrides or {}
        changes: dict[str, Any] = {}
        for key in ("max_iterations", "max_tool_chain_length"):
            if key in overrides:
                changes[key] = _positive_int(f"autonomy_levels.{name}", key, overrides[key])
        if "reflection_enabled" in overrides:
            changes["reflection_enabled"] = bool(overrides["reflection_enabled"])
        profiles[level] = replace(profiles[level], **changes)
    return profiles


@dataclass
class AgentSettings:
    """
    Attributes:
        llm_config_path: YAML file configuring LLMService
        default_autonomy_level: Preset used when a request names none
        max_execution_seconds: Wall-clock budget per request
        reflection_interval: Reflect after every N executions
        history_limit: Execution history cap per session
        autonomy_profiles: Resolved presets, including YAML overrides
        research_num_results: Search results kept per query
        research_timeout: HTTP timeout for search and scraping
        seed_user_id: Owner of the seeded default project (None: no seed)
    """

    llm_config_path: str = "configs/llm_config.yaml"
    default_autonomy_level: AutonomyLevel = AutonomyLevel.MODERATE
    max_execution_seconds: float = 300.0
    reflection_interval: int = 5
    history_limit: int = DEFAULT_HISTORY_LIMIT
    autonomy_profiles: dict[AutonomyLevel, AutonomyProfile] = field(
        default_factory=lambda: dict(DEFAULT_AUTONOMY_PROFILES)
    )
    research_num_results: int = 5
    research_timeout: float = 15.0
    seed_user_id: int | None = 1

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> AgentSettings:
        llm = config.get("llm", {}) or {}
        agent = config.get("agent", {}) or {}
        research = config.get("research", {}) or {}
        persistence = config.get("persistence", {}) or {}

        max_seconds = float(agent.get("max_execution_seconds", 300.0))
        if max_seconds <= 0:
            raise ValueError("agent.max_execution_seconds must be positive")

        return cls(
            llm_config_path=os.getenv(
                "WORDPLAY_LLM_CONFIG", llm.get("config_path", "configs/llm_config.yaml")
            ),
            default_autonomy_level=AutonomyLevel(agent.get("default_autonomy_level", "moderate")),
            max_execution_seconds=max_seconds,
            reflection_interval=_positive_int(
                "agent", "reflection_interval", agent.get("reflection_interval", 5)
            ),
            history_limit=_positive_int(
                "agent", "history_limit", agent.get("history_limit", DEFAULT_HISTORY_LIMIT)
            ),
            autonomy_profiles=parse_autonomy_profiles(config.get("autonomy_levels")),
            research_num_results=research.get("num_results", 5),
            research_timeout=float(research.get("timeout", 15.0)),
            seed_user_id=persistence.get("seed_user_id", 1),
        )
