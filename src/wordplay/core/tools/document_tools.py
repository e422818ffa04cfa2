# ============================================
# DOCUMENT TOOLS
# ============================================

from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.text_ops import count_words
from wordplay.core.interfaces.persistence import PersistenceProtocol
from wordplay.core.tools.base import ParamSpec, ParamType, Tool


class _DocumentTool(Tool):
    def __init__(self, persistence: PersistenceProtocol):
        self.persistence = persistence

    def _project_id(self, params: dict[str, Any], context: ExecutionContext) -> int | None:
        if "project_id" in params:
            return params["project_id"]
        if context.current_project:
            return context.current_project.get("id")
        return None


class ListDocumentsTool(_DocumentTool):
    @property
    def name(self) -> str:
        return "list_documents"

    @property
    def description(self) -> str:
        return "Get all documents in a project (defaults to the active project)"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"project_id": ParamSpec.optional(ParamType.INTEGER, "Project id")}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        project_id = self._project_id(params, context)
        if project_id is None:
            return {"success": False, "error": "No project specified and no active project"}
        documents = await self.persistence.list_documents(project_id)
        return {
            "success": True,
            "data": [d.to_dict() for d in documents],
            "message": f"Found {len(documents)} documents",
        }


class GetDocumentTool(_DocumentTool):
    @property
    def name(self) -> str:
        return "get_document"

    @property
    def description(self) -> str:
        return "Get content and details of a specific document"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"document_id": ParamSpec(ParamType.INTEGER, description="Document id")}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        document = await self.persistence.get_document(params["document_id"])
        if document is None:
            return {"success": False, "error": "Document not found"}
        return {
            "success": True,
            "data": document.to_dict(),
            "message": f"Retrieved document: {document.title}",
        }


class CreateDocumentTool(_DocumentTool):
    @property
    def name(self) -> str:
        return "create_document"

    @property
    def description(self) -> str:
        return "Create a new document in a project (defaults to the active project)"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "title": ParamSpec(ParamType.STRING, description="Document title"),
            "content": ParamSpec.optional(ParamType.STRING, "Initial content"),
            "project_id": ParamSpec.optional(ParamType.INTEGER, "Project id"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        project_id = self._project_id(params, context)
        if project_id is None:
            return {"success": False, "error": "No project specified and no active project"}
        content = params.get("content", "")
        document = await self.persistence.create_document(
            project_id=project_id,
            title=params["title"],
            content=content,
            word_count=count_words(content),
        )
        await context.refresh_project_data()
        return {
            "success": True,
            "data": document.to_dict(),
            "message": f"Created document: {document.title}",
        }


class UpdateDocumentTool(_DocumentTool):
    @property
    def name(self) -> str:
        return "update_document"

    @property
    def description(self) -> str:
        return "Update a document's title or content"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "document_id": ParamSpec(ParamType.INTEGER, description="Document id"),
            "title": ParamSpec.optional(ParamType.STRING, "New title"),
            "content": ParamSpec.optional(ParamType.STRING, "New content"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        changes = {k: v for k, v in params.items() if k != "document_id"}
        if not changes:
            return {"success": False, "error": "No changes given"}
        if "content" in changes:
            changes["word_count"] = count_words(changes["content"])

        document = await self.persistence.update_document(params["document_id"], changes)
        if document is None:
            return {"success": False, "error": "Document not found"}

        if context.current_document and context.current_document.get("id") == document.id:
            await context.update({"current_document": document.to_dict()})
        return {
            "success": True,
            "data": document.to_dict(),
            "message": f"Updated document: {document.title}",
        }
