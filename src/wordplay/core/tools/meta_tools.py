# ============================================
# GOAL AND MEMORY TOOLS
# ============================================

from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.models import Goal, GoalStatus
from wordplay.core.tools.base import ParamSpec, ParamType, Tool


def _sub_goal(item: Any) -> Goal:
    if isinstance(item, dict):
        return Goal(
            description=str(item.get("description", "")),
            priority=int(item.get("priority", 1)),
            required_tools=[str(t) for t in item.get("required_tools", [])],
        )
    return Goal(description=str(item))


class SetGoalTool(Tool):
    @property
    def name(self) -> str:
        return "set_goal"

    @property
    def description(self) -> str:
        return "Record a goal to pursue during this session"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "description": ParamSpec(ParamType.STRING, description="What should be achieved"),
            "priority": ParamSpec.optional(ParamType.INTEGER, "1 (highest) to 5"),
            "estimated_steps": ParamSpec.optional(ParamType.INTEGER, "Expected number of tool calls"),
            "required_tools": ParamSpec.optional(ParamType.ARRAY, "Tools expected to be needed"),
            "sub_goals": ParamSpec.optional(
                ParamType.ARRAY, "Sub-goal descriptions (strings or objects with a description)"
            ),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        goal = context.add_goal(
            Goal(
                description=params["description"],
                priority=params.get("priority", 1),
                estimated_steps=params.get("estimated_steps", 5),
                required_tools=[str(t) for t in params.get("required_tools", [])],
                sub_goals=[_sub_goal(item) for item in params.get("sub_goals", [])],
            )
        )
        return {"success": True, "data": goal.to_dict(), "message": f"Goal set: {goal.description}"}


class UpdateGoalStatusTool(Tool):
    @property
    def name(self) -> str:
        return "update_goal_status"

    @property
    def description(self) -> str:
        return "Move a goal forward: pending -> in_progress -> completed or failed"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "goal_id": ParamSpec(ParamType.STRING, description="Goal id"),
            "status": ParamSpec(
                ParamType.STRING, description="in_progress, completed or failed"
            ),
            "notes": ParamSpec.optional(ParamType.STRING, "Progress notes"),
            "actual_steps": ParamSpec.optional(ParamType.INTEGER, "Tool calls spent so far"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        try:
            status = GoalStatus(params["status"])
            goal = context.update_goal_status(
                params["goal_id"],
                status,
                notes=params.get("notes"),
                actual_steps=params.get("actual_steps"),
            )
        except KeyError as e:
            return {"success": False, "error": str(e.args[0])}
        except ValueError as e:
            return {"success": False, "error": str(e)}
        return {
            "success": True,
            "data": goal.to_dict(),
            "message": f"Goal is now {goal.status.value}",
        }


class StoreMemoryTool(Tool):
    @property
    def name(self) -> str:
        return "store_memory"

    @property
    def description(self) -> str:
        return "Remember a value under a key for later in the session"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "key": ParamSpec(ParamType.STRING, description="Memory key"),
            "value": ParamSpec(ParamType.ANY, description="Value to remember"),
            "category": ParamSpec.optional(ParamType.STRING, "Grouping label (default: general)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        entry = context.store_memory(
            params["key"], params["value"], params.get("category", "general")
        )
        return {"success": True, "data": entry.to_dict(), "message": f"Stored memory '{entry.key}'"}


class RecallMemoryTool(Tool):
    @property
    def name(self) -> str:
        return "recall_memory"

    @property
    def description(self) -> str:
        return "Retrieve a value stored earlier with store_memory"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"key": ParamSpec(ParamType.STRING, description="Memory key")}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        entry = context.recall_memory(params["key"])
        if entry is None:
            return {"success": False, "error": f"No memory stored under '{params['key']}'"}
        return {"success": True, "data": entry.to_dict(), "message": f"Recalled memory '{entry.key}'"}


class ListMemoriesTool(Tool):
    @property
    def name(self) -> str:
        return "list_memories"

    @property
    def description(self) -> str:
        return "List stored memory keys, optionally filtered by category"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"category": ParamSpec.optional(ParamType.STRING, "Only this category")}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        category = params.get("category")
        entries = [
            {"key": e.key, "category": e.category, "access_count": e.access_count}
            for e in context.persistent_memory.values()
            if category is None or e.category == category
        ]
        return {"success": True, "data": entries, "message": f"Found {len(entries)} memories"}
