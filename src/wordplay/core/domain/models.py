"""
Core Domain Models

This module defines the records passed between the registry, executor,
planner, loop, reflector and synthesizer. Results and history steps are
immutable once created; goals and memory entries are owned and mutated only
by the ExecutionContext.
"""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class ToolResult:
    """
    Outcome of a single tool invocation.

    Attributes:
        success: Whether the tool completed its work
        tool: Name of the originating tool (set even on failure)
        execution_time_ms: Wall-clock time spent, never negative
        data: Opaque payload produced by the tool
        error: Error message if the tool failed
        message: Short human-readable summary
    """

    success: bool
    tool: str
    execution_time_ms: float = 0.0
    data: Any = None
    error: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExecutionStep:
    """
    One entry in the session's execution history.

    The executor writes two steps per attempt: an "attempted" step before the
    tool body runs (result is None) and a "result" step afterwards.
    """

    action: str
    tool_used: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    result: ToolResult | None = None
    success: bool = False
    reasoning: str = ""
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_result(self) -> bool:
        return self.result is not None


class GoalStatus(str, Enum):
    """Lifecycle of a goal. Transitions only move forward."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def rank(self) -> int:
        return {
            GoalStatus.PENDING: 0,
            GoalStatus.IN_PROGRESS: 1,
            GoalStatus.COMPLETED: 2,
            GoalStatus.FAILED: 2,
        }[self]


@dataclass
class Goal:
    description: str
    priority: int = 1
    status: GoalStatus = GoalStatus.PENDING
    sub_goals: list["Goal"] = field(default_factory=list)
    required_tools: list[str] = field(default_factory=list)
    estimated_steps: int = 5
    actual_steps: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    completion_time: datetime | None = None
    notes: str = ""
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["sub_goals"] = [g.to_dict() for g in self.sub_goals]
        return data


@dataclass
class MemoryEntry:
    key: str
    value: Any
    category: str = "general"
    timestamp: datetime = field(default_factory=datetime.now)
    access_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class EditorState:
    """Snapshot of the editor as last reported by the UI or edited by a tool."""

    title: str = ""
    content: str = ""
    word_count: int = 0
    has_unsaved_changes: bool = False


@dataclass(frozen=True)
class PlannedToolCall:
    """A candidate tool invocation proposed by the planner, synthesizer or chaining."""

    tool: str
    params: dict[str, Any] = field(default_factory=dict)
    reasoning: str = ""


@dataclass(frozen=True)
class ToolExecution:
    """A tool call together with its result, as aggregated for one turn."""

    tool_name: str
    parameters: dict[str, Any]
    result: ToolResult
    reasoning: str = ""
    chained_from: str | None = None

    @property
    def success(self) -> bool:
        return self.result.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool_name,
            "success": self.result.success,
            "message": self.result.message
            or ("Executed successfully" if self.result.success else self.result.error),
            "reasoning": self.reasoning,
            "parameters": self.parameters,
            "data": self.result.data,
            "execution_time_ms": self.result.execution_time_ms,
        }


@dataclass
class PlanResult:
    plan: str
    tool_calls: list[PlannedToolCall] = field(default_factory=list)
    response: str = ""
    used_fallback: bool = False


@dataclass
class ReflectionResult:
    analysis: str
    improvements: list[str] = field(default_factory=list)
    tool_recommendations: list[str] = field(default_factory=list)
    strategy_adjustments: list[str] = field(default_factory=list)
    success_rate: float = 0.0
    used_fallback: bool = False


@dataclass
class ContinuousOperationPlan:
    """Deterministic proposal for the next phase of autonomous work."""

    next_phase: str
    description: str
    suggested_tools: list[str] = field(default_factory=list)
    autonomous_ready: bool = True


@dataclass
class SynthesisResult:
    narrative: str
    suggested_actions: list[str] = field(default_factory=list)
    additional_tool_calls: list[PlannedToolCall] = field(default_factory=list)
    continuous_operation_plan: ContinuousOperationPlan | None = None
    research_findings: dict[str, Any] | None = None
    used_fallback: bool = False


@dataclass(frozen=True)
class ContinuationDecision:
    should_continue: bool
    reason: str


@dataclass
class ExecutionDetails:
    tools_planned: int = 0
    tools_executed: int = 0
    successful_tools: int = 0
    failed_tools: int = 0
    success_rate: float = 0.0
    average_tool_time_ms: float = 0.0


@dataclass
class AgentResponse:
    """Result of one request handled by the orchestrator."""

    narrative: str
    tools_executed: list[dict[str, Any]] = field(default_factory=list)
    suggested_actions: list[str] = field(default_factory=list)
    execution_details: ExecutionDetails = field(default_factory=ExecutionDetails)
    plan: str = ""
    autonomous_execution: dict[str, Any] = field(default_factory=dict)
    continuous_operation_plan: ContinuousOperationPlan | None = None
    research_findings: dict[str, Any] | None = None
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
