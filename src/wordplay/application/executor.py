"""
Application Layer - Agent Executor Service

Service layer used by both the CLI and the HTTP API. It owns the agent
instance and the per-session execution contexts, runs requests through the
autonomous loop, and shapes the result into an AgentResponse.

`handle()` never raises: any unexpected failure becomes an apology narrative
with zero tool results, so callers always get a well-formed response.
"""

import asyncio
from contextlib import nullcontext
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from wordplay.application.factory import AgentFactory
from wordplay.core.domain.agent import WordPlayAgent
from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.models import AgentResponse, ExecutionDetails, ToolResult
from wordplay.core.domain.orchestrator import LoopOutcome

logger = structlog.get_logger()

APOLOGY = (
    "I'm sorry, something went wrong while I was working on your request "
    "({error}). Please try again."
)


def execution_details(outcome: LoopOutcome) -> ExecutionDetails:
    executions = outcome.executions
    total = len(executions)
    successful = outcome.successful
    return ExecutionDetails(
        tools_planned=len(outcome.plan.tool_calls),
        tools_executed=total,
        successful_tools=successful,
        failed_tools=total - successful,
        success_rate=successful / total if total else 0.0,
        average_tool_time_ms=(
            sum(e.result.execution_time_ms for e in executions) / total if total else 0.0
        ),
    )


class AgentExecutor:
    """
    Unified execution entry point.

    Sessions: a request carrying a session_id reuses the ExecutionContext kept
    for that id (history, goals and memory carry over). Without a session_id
    every request gets a fresh context. Contexts are never shared between
    sessions, and requests on the same session are processed one at a time.
    """

    def __init__(
        self,
        factory: Optional[AgentFactory] = None,
        profile: str = "dev",
        agent: Optional[WordPlayAgent] = None,
    ):
        """
        Args:
            factory: AgentFactory used to build the agent lazily
            profile: Configuration profile for the factory
            agent: Pre-built agent (skips the factory)
        """
        self.factory = factory or AgentFactory()
        self.profile = profile
        self._agent = agent
        self.sessions: Dict[str, ExecutionContext] = {}
        self._session_locks: Dict[str, asyncio.Lock] = {}
        self.logger = logger.bind(component="agent_executor")

    async def get_agent(self) -> WordPlayAgent:
        if self._agent is None:
            self._agent = await self.factory.create_agent(profile=self.profile)
        return self._agent

    def _session_lock(self, session_id: Optional[str]):
        """Requests on one session run one at a time; sessionless requests never wait."""
        if not session_id:
            return nullcontext()
        return self._session_locks.setdefault(session_id, asyncio.Lock())

    async def _context_for(
        self,
        agent: WordPlayAgent,
        user_id: int,
        session_id: Optional[str],
        autonomy_level: Optional[str],
    ) -> ExecutionContext:
        context = self.sessions.get(session_id) if session_id else None
        if context is None:
            context = agent.new_context(user_id=user_id, autonomy_level=autonomy_level)
            if session_id:
                self.sessions[session_id] = context
                self.logger.info("session_created", session_id=session_id)
        elif autonomy_level:
            context.set_autonomy_level(autonomy_level, agent.autonomy_profiles)
        return context

    async def handle(
        self,
        user_id: int,
        request: str,
        context_update: Optional[Dict[str, Any]] = None,
        autonomy_level: Optional[str] = None,
        session_id: Optional[str] = None,
        max_execution_seconds: Optional[float] = None,
    ) -> AgentResponse:
        """
        Run one natural-language request through the autonomous loop.

        Args:
            user_id: Requesting user
            request: Natural-language request
            context_update: UI state (current_project, current_document,
                editor_state, llm_provider, llm_model)
            autonomy_level: conservative, moderate or aggressive
            session_id: Optional session whose context should be reused
            max_execution_seconds: Override for the wall-clock budget

        Returns:
            AgentResponse; an apology response on unexpected failure
        """
        start_time = datetime.now()
        self.logger.info(
            "request_started",
            request=request[:100],
            user_id=user_id,
            session_id=session_id,
            autonomy_level=autonomy_level,
        )

        try:
            agent = await self.get_agent()
            async with self._session_lock(session_id):
                context = await self._context_for(agent, user_id, session_id, autonomy_level)
                if context_update:
                    await context.update(context_update)
                outcome = await agent.run(request, context, max_execution_seconds)
                response = self._to_response(outcome, context, session_id)
        except Exception as e:
            self.logger.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                session_id=session_id,
            )
            return AgentResponse(
                narrative=APOLOGY.format(error=str(e) or type(e).__name__),
                session_id=session_id,
            )

        self.logger.info(
            "request_completed",
            tools_executed=response.execution_details.tools_executed,
            success_rate=round(response.execution_details.success_rate, 2),
            stop_reason=outcome.stop_reason,
            duration_seconds=(datetime.now() - start_time).total_seconds(),
        )
        return response

    def _to_response(
        self, outcome: LoopOutcome, context: ExecutionContext, session_id: Optional[str]
    ) -> AgentResponse:
        synthesis = outcome.synthesis
        return AgentResponse(
            narrative=synthesis.narrative,
            tools_executed=[e.to_dict() for e in outcome.executions],
            suggested_actions=synthesis.suggested_actions,
            execution_details=execution_details(outcome),
            plan=outcome.plan.plan,
            autonomous_execution={
                "autonomy_level": context.autonomy_level.value,
                "iterations": outcome.iterations,
                "max_iterations": context.autonomy.max_iterations,
                "stop_reason": outcome.stop_reason,
                "duration_ms": round(outcome.duration_ms, 1),
                "goal_id": outcome.goal_id,
                "execution_log": outcome.execution_log,
                "context": context.describe(),
            },
            continuous_operation_plan=synthesis.continuous_operation_plan,
            research_findings=synthesis.research_findings,
            session_id=session_id,
        )

    async def execute_tool(
        self,
        user_id: int,
        tool_name: str,
        params: Optional[Dict[str, Any]] = None,
        context_update: Optional[Dict[str, Any]] = None,
        session_id: Optional[str] = None,
    ) -> ToolResult:
        """Run a single tool directly, outside the autonomous loop."""
        agent = await self.get_agent()
        async with self._session_lock(session_id):
            context = await self._context_for(agent, user_id, session_id, None)
            if context_update:
                await context.update(context_update)
            return await agent.tool_executor.execute(
                tool_name, params, context, reasoning="Direct tool call"
            )

    async def list_tools(self) -> List[Dict[str, Any]]:
        agent = await self.get_agent()
        return agent.registry.describe()

    async def context_summary(self, session_id: Optional[str] = None) -> Dict[str, Any]:
        """Summary of a session's context, or of a fresh one."""
        agent = await self.get_agent()
        context = self.sessions.get(session_id) if session_id else None
        if context is None:
            context = agent.new_context()
        return {
            "session_id": session_id if session_id in self.sessions else None,
            "description": context.describe(),
            "summary": context.summary(),
            "history_length": len(context.execution_history),
            "goals": [g.to_dict() for g in context.current_goals],
        }
