# ============================================
# RESEARCH TOOLS
# ============================================

from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.interfaces.persistence import PersistenceProtocol
from wordplay.core.interfaces.research import WebResearchProtocol
from wordplay.core.tools.base import ParamSpec, ParamType, Tool


class WebSearchTool(Tool):
    """Web search through the research collaborator"""

    def __init__(self, research: WebResearchProtocol):
        self.research = research

    @property
    def name(self) -> str:
        return "web_search"

    @property
    def description(self) -> str:
        return "Search the web for information on a topic"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "query": ParamSpec(ParamType.STRING, description="Search query"),
            "source": ParamSpec.optional(ParamType.STRING, "Source to search (default: web)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        query = params["query"]
        found = await self.research.search(query, params.get("source", "web"))
        if found.get("error"):
            return {"success": False, "error": f"Search failed: {found['error']}"}
        results = found.get("results", [])
        return {
            "success": True,
            "data": {"query": query, "results": results, "summary": found.get("summary")},
            "message": f"Found {len(results)} search results for: {query}",
        }


class ScrapeWebpageTool(Tool):
    def __init__(self, research: WebResearchProtocol):
        self.research = research

    @property
    def name(self) -> str:
        return "scrape_webpage"

    @property
    def description(self) -> str:
        return "Extract the readable text content of a specific URL"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"url": ParamSpec(ParamType.STRING, description="Page URL")}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        page = await self.research.scrape(params["url"])
        if page.get("error"):
            return {"success": False, "error": page["error"]}
        return {
            "success": True,
            "data": page,
            "message": f"Extracted {page.get('word_count', 0)} words from {page.get('domain', params['url'])}",
        }


class SaveSourceTool(Tool):
    def __init__(self, persistence: PersistenceProtocol):
        self.persistence = persistence

    @property
    def name(self) -> str:
        return "save_source"

    @property
    def description(self) -> str:
        return "Save a research source (URL, note or quote) to a project"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "name": ParamSpec(ParamType.STRING, description="Source name"),
            "type": ParamSpec.optional(ParamType.STRING, "Source type: url, note, book (default: url)"),
            "url": ParamSpec.optional(ParamType.STRING, "Source URL"),
            "content": ParamSpec.optional(ParamType.STRING, "Excerpt or notes"),
            "project_id": ParamSpec.optional(ParamType.INTEGER, "Project id (default: active project)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        project_id = params.get("project_id")
        if project_id is None and context.current_project:
            project_id = context.current_project.get("id")
        if project_id is None:
            return {"success": False, "error": "No project specified and no active project"}

        source = await self.persistence.create_source(
            project_id=project_id,
            type=params.get("type", "url"),
            name=params["name"],
            url=params.get("url"),
            content=params.get("content"),
        )
        await context.refresh_project_data()
        return {
            "success": True,
            "data": source.to_dict(),
            "message": f"Saved source: {source.name}",
        }


class GetSourcesTool(Tool):
    def __init__(self, persistence: PersistenceProtocol):
        self.persistence = persistence

    @property
    def name(self) -> str:
        return "get_sources"

    @property
    def description(self) -> str:
        return "Get all research sources for a project (defaults to the active project)"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"project_id": ParamSpec.optional(ParamType.INTEGER, "Project id")}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        project_id = params.get("project_id")
        if project_id is None and context.current_project:
            project_id = context.current_project.get("id")
        if project_id is None:
            return {"success": False, "error": "No project specified and no active project"}
        sources = await self.persistence.list_sources(project_id)
        return {
            "success": True,
            "data": [s.to_dict() for s in sources],
            "message": f"Found {len(sources)} sources",
        }
