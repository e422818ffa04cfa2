from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from wordplay.application.executor import AgentExecutor

router = APIRouter()
executor = AgentExecutor()


def get_executor() -> AgentExecutor:
    return executor


class _CamelModel(BaseModel):
    """Accepts both snake_case and the editor UI's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EditorStateModel(_CamelModel):
    title: str = ""
    content: str = ""
    word_count: Optional[int] = None
    has_unsaved_changes: bool = False


class ContextUpdateModel(_CamelModel):
    """UI state merged into the session context before the request runs."""

    current_project: Optional[Dict[str, Any]] = None
    current_document: Optional[Dict[str, Any]] = None
    editor_state: Optional[EditorStateModel] = None
    llm_provider: Optional[str] = None
    llm_model: Optional[str] = None


class AgentRequest(_CamelModel):
    """Natural-language request for the autonomous agent."""

    request: str = Field(..., min_length=1)
    user_id: int = 1
    context: Optional[ContextUpdateModel] = None
    autonomy_level: Literal["conservative", "moderate", "aggressive"] = "moderate"
    session_id: Optional[str] = None
    max_execution_seconds: Optional[float] = Field(None, gt=0)


class ToolRequest(_CamelModel):
    """Direct invocation of a single tool."""

    tool: str
    params: Dict[str, Any] = Field(default_factory=dict)
    user_id: int = 1
    context: Optional[ContextUpdateModel] = None
    session_id: Optional[str] = None


def _context_update(context: Optional[ContextUpdateModel]) -> Optional[Dict[str, Any]]:
    if context is None:
        return None
    return context.model_dump(exclude_none=True)


@router.post("/agent/request")
async def handle_request(
    request: AgentRequest, executor: AgentExecutor = Depends(get_executor)
) -> Dict[str, Any]:
    """Run a request through plan, execute, reflect and synthesize."""
    try:
        response = await executor.handle(
            user_id=request.user_id,
            request=request.request,
            context_update=_context_update(request.context),
            autonomy_level=request.autonomy_level,
            session_id=request.session_id,
            max_execution_seconds=request.max_execution_seconds,
        )
        return response.to_dict()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/agent/tool")
async def execute_tool(
    request: ToolRequest, executor: AgentExecutor = Depends(get_executor)
) -> Dict[str, Any]:
    """Execute one tool directly; tool failures come back with success=false."""
    try:
        result = await executor.execute_tool(
            user_id=request.user_id,
            tool_name=request.tool,
            params=request.params,
            context_update=_context_update(request.context),
            session_id=request.session_id,
        )
        return result.to_dict()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/agent/tools")
async def list_tools(executor: AgentExecutor = Depends(get_executor)) -> Dict[str, Any]:
    try:
        tools = await executor.list_tools()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"tools": tools, "count": len(tools)}


@router.get("/agent/context")
async def get_context(
    session_id: Optional[str] = None, executor: AgentExecutor = Depends(get_executor)
) -> Dict[str, Any]:
    try:
        return await executor.context_summary(session_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
