# ============================================
# PROJECT TOOLS
# ============================================

from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.interfaces.persistence import PersistenceProtocol
from wordplay.core.tools.base import ParamSpec, ParamType, Tool


class _PersistenceTool(Tool):
    def __init__(self, persistence: PersistenceProtocol):
        self.persistence = persistence


class ListProjectsTool(_PersistenceTool):
    """List the user's projects"""

    @property
    def name(self) -> str:
        return "list_projects"

    @property
    def description(self) -> str:
        return "Get all projects for the user"

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        projects = await self.persistence.list_projects(context.user_id)
        return {
            "success": True,
            "data": [p.to_dict() for p in projects],
            "message": f"Found {len(projects)} projects",
        }


class GetProjectTool(_PersistenceTool):
    @property
    def name(self) -> str:
        return "get_project"

    @property
    def description(self) -> str:
        return "Get details of a specific project"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"project_id": ParamSpec(ParamType.INTEGER, description="Project id")}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        project = await self.persistence.get_project(params["project_id"])
        if project is None:
            return {"success": False, "error": "Project not found"}
        return {
            "success": True,
            "data": project.to_dict(),
            "message": f"Retrieved project: {project.name}",
        }


class CreateProjectTool(_PersistenceTool):
    @property
    def name(self) -> str:
        return "create_project"

    @property
    def description(self) -> str:
        return "Create a new writing project"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "name": ParamSpec(ParamType.STRING, description="Project name"),
            "type": ParamSpec(ParamType.STRING, description="Project type, e.g. blog, novel, report"),
            "style": ParamSpec.optional(ParamType.STRING, "Writing style, e.g. formal, casual"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        project = await self.persistence.create_project(
            user_id=context.user_id,
            name=params["name"],
            type=params["type"],
            style=params.get("style", "neutral"),
        )
        return {
            "success": True,
            "data": project.to_dict(),
            "message": f"Created project: {project.name}",
        }


class UpdateProjectTool(_PersistenceTool):
    @property
    def name(self) -> str:
        return "update_project"

    @property
    def description(self) -> str:
        return "Update project name, type or style"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "project_id": ParamSpec(ParamType.INTEGER, description="Project id"),
            "name": ParamSpec.optional(ParamType.STRING, "New name"),
            "type": ParamSpec.optional(ParamType.STRING, "New type"),
            "style": ParamSpec.optional(ParamType.STRING, "New style"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        changes = {k: v for k, v in params.items() if k != "project_id"}
        if not changes:
            return {"success": False, "error": "No changes given"}
        project = await self.persistence.update_project(params["project_id"], changes)
        if project is None:
            return {"success": False, "error": "Project not found"}

        if context.current_project and context.current_project.get("id") == project.id:
            await context.update({"current_project": project.to_dict()})
        return {
            "success": True,
            "data": project.to_dict(),
            "message": f"Updated project: {project.name}",
        }
