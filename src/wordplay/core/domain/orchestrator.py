"""
Autonomous Loop

Bounded multi-step execution of a natural-language request:

    Planning -> Executing -> Reflecting (optional) -> Deciding -> {Executing | Done}

- Planning: the Planner proposes the initial tool calls.
- Executing: each call runs through the ToolExecutor; the chaining heuristics
  append follow-up calls that run inline (they are not re-planned).
- Reflecting: every `reflection_interval` executions within an iteration,
  when the autonomy preset enables it; advisory only.
- Deciding: the Synthesizer summarizes the iteration and the continuation
  policy decides whether its proposed calls become the next iteration.
- Done: a final synthesis over every execution of the session's turn.

Tool failures never abort the loop; they only count against the success-rate
thresholds. Iteration and wall-clock budgets are checked between iterations,
never mid-tool.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

import structlog

from wordplay.core.domain.chaining import next_tools
from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.errors import BudgetExceededError
from wordplay.core.domain.models import (
    ContinuationDecision,
    PlannedToolCall,
    PlanResult,
    SynthesisResult,
    ToolExecution,
)
from wordplay.core.domain.planner import Planner, provider_config_for
from wordplay.core.domain.reflector import REFLECTION_WINDOW, Reflector
from wordplay.core.domain.synthesizer import Synthesizer
from wordplay.core.tools.executor import ToolExecutor

LOW_SUCCESS_RATE = 0.3
DECLINING_SUCCESS_RATE = 0.5
DECLINE_CHECK_AFTER_ITERATION = 5
DECLINE_WINDOW = 3
DEFAULT_MAX_EXECUTION_SECONDS = 300.0
DEFAULT_REFLECTION_INTERVAL = 5

STOP_LOW_SUCCESS = "low success rate"
STOP_TASK_COMPLETE = "task complete"
STOP_APPROACHING_LIMIT = "approaching iteration limit"
STOP_DECLINING = "declining progress"
STOP_ITERATION_LIMIT = "iteration limit reached"
STOP_TIME_BUDGET = "time budget exceeded"
STOP_NO_TOOLS = "no tools to execute"
STOP_NO_TOOLS_REQUIRED = "no tools required"


def _rate(executions: list[ToolExecution]) -> float:
    if not executions:
        return 0.0
    return sum(1 for e in executions if e.success) / len(executions)


def evaluate_continuation(
    executions: list[ToolExecution],
    synthesis: SynthesisResult,
    iteration: int,
    max_iterations: int,
) -> ContinuationDecision:
    """
    Decide whether another iteration should run. Rules apply in order:

    1. iteration success rate < 0.3 -> stop
    2. no additional tool calls proposed -> stop
    3. iteration >= max_iterations - 1 -> stop
    4. iteration > 5 and success rate of the last 3 executions < 0.5 -> stop
    5. otherwise continue
    """
    if _rate(executions) < LOW_SUCCESS_RATE:
        return ContinuationDecision(False, STOP_LOW_SUCCESS)
    if not synthesis.additional_tool_calls:
        return ContinuationDecision(False, STOP_TASK_COMPLETE)
    if iteration >= max_iterations - 1:
        return ContinuationDecision(False, STOP_APPROACHING_LIMIT)
    if iteration > DECLINE_CHECK_AFTER_ITERATION:
        if _rate(executions[-DECLINE_WINDOW:]) < DECLINING_SUCCESS_RATE:
            return ContinuationDecision(False, STOP_DECLINING)
    return ContinuationDecision(True, "continuing with good progress")


@dataclass
class LoopOutcome:
    plan: PlanResult
    executions: list[ToolExecution]
    synthesis: SynthesisResult
    iterations: int
    stop_reason: str
    duration_ms: float
    execution_log: list[dict[str, Any]] = field(default_factory=list)
    goal_id: str | None = None

    @property
    def successful(self) -> int:
        return sum(1 for e in self.executions if e.success)


class AutonomousLoop:
    def __init__(
        self,
        executor: ToolExecutor,
        planner: Planner,
        reflector: Reflector,
        synthesizer: Synthesizer,
        max_execution_seconds: float = DEFAULT_MAX_EXECUTION_SECONDS,
        reflection_interval: int = DEFAULT_REFLECTION_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.executor = executor
        self.planner = planner
        self.reflector = reflector
        self.synthesizer = synthesizer
        self.max_execution_seconds = max_execution_seconds
        self.reflection_interval = reflection_interval
        self.clock = clock
        self.logger = structlog.get_logger().bind(component="autonomous_loop")

    async def run(
        self,
        request: str,
        context: ExecutionContext,
        max_execution_seconds: float | None = None,
    ) -> LoopOutcome:
        start = self.clock()
        budget = max_execution_seconds or self.max_execution_seconds
        max_iterations = context.autonomy.max_iterations
        execution_log: list[dict[str, Any]] = []

        self.logger.info(
            "loop_start",
            request=request[:100],
            autonomy_level=context.autonomy_level.value,
            max_iterations=max_iterations,
        )

        # Planning
        plan = await self.planner.plan(request, context)
        execution_log.append(
            {
                "iteration": 0,
                "phase": "planning",
                "action": "Initial plan created",
                "plan": plan.plan,
                "tools_planned": len(plan.tool_calls),
                "used_fallback": plan.used_fallback,
                "timestamp": datetime.now(),
            }
        )

        if not plan.tool_calls:
            self.logger.info("loop_no_tools", reason=STOP_NO_TOOLS_REQUIRED)
            return LoopOutcome(
                plan=plan,
                executions=[],
                synthesis=SynthesisResult(narrative=plan.response, used_fallback=plan.used_fallback),
                iterations=0,
                stop_reason=STOP_NO_TOOLS_REQUIRED,
                duration_ms=self._elapsed_ms(start),
                execution_log=execution_log,
            )

        goal_id = await self._start_goal(request, plan, context)

        all_executions: list[ToolExecution] = []
        pending: list[PlannedToolCall] = list(plan.tool_calls)
        iteration = 0
        stop_reason = STOP_ITERATION_LIMIT

        try:
            while True:
                self._check_budget(start, budget, iteration, max_iterations)
                iteration += 1
                self.logger.info("iteration_start", iteration=iteration, planned=len(pending))

                executions = await self._run_iteration(
                    pending, context, goal_id, iteration, execution_log
                )
                all_executions.extend(executions)

                if not executions:
                    stop_reason = STOP_NO_TOOLS
                    break

                synthesis = await self.synthesizer.synthesize(
                    request, executions, provider_config_for(context)
                )
                decision = evaluate_continuation(executions, synthesis, iteration, max_iterations)

                execution_log.append(
                    {
                        "iteration": iteration,
                        "phase": "execution",
                        "action": f"Executed {len(executions)} tools",
                        "tools_executed": [e.tool_name for e in executions],
                        "successful_tools": sum(1 for e in executions if e.success),
                        "failed_tools": sum(1 for e in executions if not e.success),
                        "should_continue": decision.should_continue,
                        "reasoning": decision.reason,
                        "timestamp": datetime.now(),
                    }
                )

                if not decision.should_continue:
                    stop_reason = decision.reason
                    break
                pending = list(synthesis.additional_tool_calls)
        except BudgetExceededError as e:
            stop_reason = e.reason

        self.logger.info(
            "loop_stopped",
            reason=stop_reason,
            iterations=iteration,
            executions=len(all_executions),
        )

        # Done: final synthesis over the whole turn
        final = await self.synthesizer.synthesize(
            request, all_executions, provider_config_for(context)
        )
        await self._finish_goal(goal_id, all_executions, context)
        outcome = LoopOutcome(
            plan=plan,
            executions=all_executions,
            synthesis=final,
            iterations=iteration,
            stop_reason=stop_reason,
            duration_ms=self._elapsed_ms(start),
            execution_log=execution_log,
            goal_id=goal_id,
        )
        await self._remember_execution(request, outcome, context)
        return outcome

    async def _run_iteration(
        self,
        pending: list[PlannedToolCall],
        context: ExecutionContext,
        goal_id: str | None,
        iteration: int,
        execution_log: list[dict[str, Any]],
    ) -> list[ToolExecution]:
        executions: list[ToolExecution] = []
        cap = context.max_tool_chain_length

        for call in pending:
            if len(executions) >= cap:
                self.logger.warning("tool_chain_cap_reached", cap=cap, iteration=iteration)
                break
            result = await self.executor.execute(call.tool, call.params, context, call.reasoning)
            executions.append(ToolExecution(call.tool, call.params, result, call.reasoning))
            await self._maybe_reflect(executions, context, goal_id, iteration, execution_log)

            for chained in next_tools(call.tool, result, context):
                if len(executions) >= cap:
                    self.logger.warning("tool_chain_cap_reached", cap=cap, iteration=iteration)
                    break
                reasoning = f"Auto-chained from {call.tool}: {chained.reasoning}"
                self.logger.info("tool_chained", source=call.tool, tool=chained.tool)
                chained_result = await self.executor.execute(
                    chained.tool, chained.params, context, reasoning
                )
                executions.append(
                    ToolExecution(
                        chained.tool,
                        chained.params,
                        chained_result,
                        reasoning,
                        chained_from=call.tool,
                    )
                )
                await self._maybe_reflect(executions, context, goal_id, iteration, execution_log)

        return executions

    async def _maybe_reflect(
        self,
        executions: list[ToolExecution],
        context: ExecutionContext,
        goal_id: str | None,
        iteration: int,
        execution_log: list[dict[str, Any]],
    ) -> None:
        if not context.reflection_enabled or not executions:
            return
        if len(executions) % self.reflection_interval != 0:
            return
        goal = context.get_goal(goal_id) if goal_id else None
        reflection = await self.reflector.reflect(
            goal, context.recent_results(REFLECTION_WINDOW), provider_config_for(context)
        )
        execution_log.append(
            {
                "iteration": iteration,
                "phase": "reflection",
                "action": reflection.analysis,
                "success_rate": reflection.success_rate,
                "tool_recommendations": reflection.tool_recommendations,
                "strategy_adjustments": reflection.strategy_adjustments,
                "timestamp": datetime.now(),
            }
        )

    def _check_budget(
        self, start: float, budget: float, iteration: int, max_iterations: int
    ) -> None:
        if iteration >= max_iterations:
            raise BudgetExceededError(STOP_ITERATION_LIMIT)
        if self.clock() - start >= budget:
            raise BudgetExceededError(STOP_TIME_BUDGET)

    def _elapsed_ms(self, start: float) -> float:
        return max(0.0, (self.clock() - start) * 1000)

    # ------------------------------------------------------------------
    # Goal and memory bookkeeping (recorded in history, not reported)
    # ------------------------------------------------------------------

    async def _start_goal(
        self, request: str, plan: PlanResult, context: ExecutionContext
    ) -> str | None:
        if "set_goal" not in self.executor.registry:
            return None
        result = await self.executor.execute(
            "set_goal",
            {
                "description": request,
                "priority": 1,
                "estimated_steps": len(plan.tool_calls) or 5,
                "required_tools": sorted({c.tool for c in plan.tool_calls}),
            },
            context,
            "Track the user's request as a goal",
        )
        if not result.success or not isinstance(result.data, dict):
            return None
        goal_id = result.data.get("id")
        await self.executor.execute(
            "update_goal_status",
            {"goal_id": goal_id, "status": "in_progress"},
            context,
            "Execution started",
        )
        return goal_id

    async def _finish_goal(
        self,
        goal_id: str | None,
        executions: list[ToolExecution],
        context: ExecutionContext,
    ) -> None:
        if goal_id is None or "update_goal_status" not in self.executor.registry:
            return
        successful = sum(1 for e in executions if e.success)
        status = "completed" if successful or not executions else "failed"
        await self.executor.execute(
            "update_goal_status",
            {
                "goal_id": goal_id,
                "status": status,
                "notes": f"Completed with {successful}/{len(executions)} successful tool executions",
                "actual_steps": len(executions),
            },
            context,
            "Execution finished",
        )

    async def _remember_execution(
        self, request: str, outcome: LoopOutcome, context: ExecutionContext
    ) -> None:
        if "store_memory" not in self.executor.registry:
            return
        total = len(outcome.executions)
        await self.executor.execute(
            "store_memory",
            {
                "key": f"execution_{int(time.time() * 1000)}",
                "value": {
                    "request": request,
                    "duration_ms": round(outcome.duration_ms),
                    "iterations": outcome.iterations,
                    "tools_executed": total,
                    "success_rate": outcome.successful / total if total else 0.0,
                    "autonomy_level": context.autonomy_level.value,
                    "stop_reason": outcome.stop_reason,
                },
                "category": "execution_history",
            },
            context,
            "Store execution summary for later sessions",
        )
