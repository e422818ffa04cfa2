"""
Chaining Heuristics

Deterministic, order-sensitive table of follow-up tool calls for a successful
tool result. Keeps obviously useful continuations (search -> scrape -> save)
from needing a full model round-trip. Chained calls are executed inline by the
autonomous loop and are not chained again.
"""

from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.models import PlannedToolCall, ToolResult

SCRAPE_ANALYSIS_CHARS = 5000


def _search_results(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        return data["results"]
    return []


def next_tools(
    previous_tool: str, result: ToolResult, context: ExecutionContext
) -> list[PlannedToolCall]:
    """
    Map a (tool, result) pair to zero or more follow-up calls.

    Rules, evaluated in order:
    - web_search with results: scrape the top hit, and save it as a source
      when a project is active
    - scrape_webpage with content: analyze the structure of the first
      5,000 characters
    - create_document with a project active: analyze the new document's style
    - analyze_writing_style with a document active: get improvement suggestions
    """
    if not result.success:
        return []

    chained: list[PlannedToolCall] = []
    project = context.current_project

    if previous_tool == "web_search":
        results = _search_results(result.data)
        top = results[0] if results else None
        if top and top.get("url"):
            chained.append(
                PlannedToolCall(
                    tool="scrape_webpage",
                    params={"url": top["url"]},
                    reasoning="Auto-scraping top search result for detailed content",
                )
            )
            if project:
                chained.append(
                    PlannedToolCall(
                        tool="save_source",
                        params={
                            "project_id": project.get("id"),
                            "type": "url",
                            "name": top.get("title") or "Web Source",
                            "url": top["url"],
                            "content": top.get("snippet", ""),
                        },
                        reasoning="Auto-saving research source to current project",
                    )
                )

    elif previous_tool == "scrape_webpage":
        content = result.data.get("content") if isinstance(result.data, dict) else None
        if content:
            chained.append(
                PlannedToolCall(
                    tool="analyze_document_structure",
                    params={"text": content[:SCRAPE_ANALYSIS_CHARS]},
                    reasoning="Auto-analyzing scraped content structure",
                )
            )

    elif previous_tool == "create_document":
        document_id = result.data.get("id") if isinstance(result.data, dict) else None
        if project and document_id is not None:
            chained.append(
                PlannedToolCall(
                    tool="analyze_writing_style",
                    params={"document_id": document_id},
                    reasoning="Auto-analyzing newly created document style",
                )
            )

    elif previous_tool == "analyze_writing_style":
        if context.current_document:
            chained.append(
                PlannedToolCall(
                    tool="get_writing_suggestions",
                    params={"text": context.current_text(), "type": "improvement"},
                    reasoning="Auto-generating improvement suggestions based on style analysis",
                )
            )

    return chained
