"""
WordPlay Agent

Bundles the wired pieces of one agent instance: the tool registry and
executor, the autonomous loop, and the persistence collaborator used to seed
new session contexts.
"""

from dataclasses import dataclass, field

from wordplay.core.domain.context import (
    DEFAULT_AUTONOMY_PROFILES,
    DEFAULT_HISTORY_LIMIT,
    AutonomyLevel,
    AutonomyProfile,
    ExecutionContext,
)
from wordplay.core.domain.orchestrator import AutonomousLoop, LoopOutcome
from wordplay.core.interfaces.persistence import PersistenceProtocol
from wordplay.core.tools.executor import ToolExecutor
from wordplay.core.tools.registry import ToolRegistry


@dataclass
class WordPlayAgent:
    registry: ToolRegistry
    tool_executor: ToolExecutor
    loop: AutonomousLoop
    persistence: PersistenceProtocol
    autonomy_profiles: dict[AutonomyLevel, AutonomyProfile] = field(
        default_factory=lambda: dict(DEFAULT_AUTONOMY_PROFILES)
    )
    default_autonomy_level: AutonomyLevel = AutonomyLevel.MODERATE
    history_limit: int = DEFAULT_HISTORY_LIMIT

    def new_context(
        self, user_id: int = 1, autonomy_level: AutonomyLevel | str | None = None
    ) -> ExecutionContext:
        context = ExecutionContext(
            user_id=user_id,
            history_limit=self.history_limit,
            persistence=self.persistence,
        )
        context.set_autonomy_level(
            autonomy_level or self.default_autonomy_level, self.autonomy_profiles
        )
        return context

    async def run(
        self,
        request: str,
        context: ExecutionContext,
        max_execution_seconds: float | None = None,
    ) -> LoopOutcome:
        return await self.loop.run(request, context, max_execution_seconds)
