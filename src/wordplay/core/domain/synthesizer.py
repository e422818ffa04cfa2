"""
Synthesizer

Post-processes the tool executions of a turn into a narrative, suggested next
actions, candidate follow-up tool calls and a continuous-operation plan.

Two tiers:
1. Model tier - structured prompt over every execution, JSON reply.
2. Deterministic tier - per-category templated summaries, used on any model
   or parse failure.

The continuous-operation plan and research findings are always computed
deterministically, and model-proposed tool calls are filtered against the
registry, so control decisions never depend on free-form model output.
`synthesize()` never raises.
"""

import json
from typing import Any, Callable

import structlog

from wordplay.core.domain.errors import ModelCallError
from wordplay.core.domain.models import (
    ContinuousOperationPlan,
    SynthesisResult,
    ToolExecution,
)
from wordplay.core.domain.parsing import parse_json_object, parse_tool_calls
from wordplay.core.interfaces.llm import LLMProviderProtocol, ProviderConfig
from wordplay.core.prompts.agent_prompts import SYNTHESIS_SYSTEM_PROMPT, SYNTHESIS_USER_PROMPT
from wordplay.core.tools.registry import ToolRegistry

MAX_DATA_CHARS = 2000

TOOL_CATEGORIES: dict[str, tuple[str, ...]] = {
    "research": ("web_search", "scrape_webpage", "save_source", "get_sources"),
    "projects": ("list_projects", "get_project", "create_project", "update_project"),
    "documents": ("list_documents", "get_document", "create_document", "update_document"),
    "editing": (
        "get_editor_content",
        "edit_current_document",
        "replace_current_content",
        "edit_text_with_pattern",
        "edit_paragraph",
        "improve_current_text",
    ),
    "text_processing": (
        "analyze_document_structure",
        "analyze_document_stats",
        "search_in_text",
        "replace_in_text",
        "process_text_command",
    ),
    "generation": ("generate_text", "analyze_writing_style", "get_writing_suggestions"),
    "memory": ("set_goal", "update_goal_status", "store_memory", "recall_memory", "list_memories"),
}

CATEGORY_TITLES = {
    "research": "Research",
    "projects": "Projects",
    "documents": "Documents",
    "editing": "Editor",
    "text_processing": "Text Processing",
    "generation": "Writing AI",
    "memory": "Goals & Memory",
    "other": "Other",
}

EDITOR_MUTATIONS = frozenset(TOOL_CATEGORIES["editing"]) - {"get_editor_content"}


def category_of(tool_name: str) -> str:
    for category, tools in TOOL_CATEGORIES.items():
        if tool_name in tools:
            return category
    return "other"


def _count(data: Any) -> int:
    return len(data) if isinstance(data, (list, tuple)) else 0


def _field(data: Any, key: str, default: Any = None) -> Any:
    return data.get(key, default) if isinstance(data, dict) else default


# Per-tool templates: (parameters, data) -> summary line
_TEMPLATES: dict[str, Callable[[dict[str, Any], Any], str]] = {
    "web_search": lambda p, d: (
        f"Found {len(_field(d, 'results', []))} search results for '{p.get('query', '')}'"
    ),
    "scrape_webpage": lambda p, d: (
        f"Extracted {_field(d, 'word_count', 0)} words from "
        f"{_field(d, 'domain') or p.get('url', 'the page')}"
    ),
    "save_source": lambda p, d: f"Saved source '{_field(d, 'name', p.get('name', ''))}'",
    "get_sources": lambda p, d: f"Found {_count(d)} sources",
    "list_projects": lambda p, d: f"Found {_count(d)} projects",
    "get_project": lambda p, d: f"Retrieved project '{_field(d, 'name', '')}'",
    "create_project": lambda p, d: f"Created project '{_field(d, 'name', p.get('name', ''))}'",
    "update_project": lambda p, d: f"Updated project '{_field(d, 'name', '')}'",
    "list_documents": lambda p, d: f"Found {_count(d)} documents",
    "get_document": lambda p, d: f"Retrieved document '{_field(d, 'title', '')}'",
    "create_document": lambda p, d: f"Created document '{_field(d, 'title', p.get('title', ''))}'",
    "update_document": lambda p, d: f"Updated document '{_field(d, 'title', '')}'",
    "analyze_document_structure": lambda p, d: (
        f"Analyzed structure: {_field(d, 'paragraph_count', 0)} paragraphs, "
        f"{len(_field(d, 'headings', []))} headings"
    ),
    "analyze_document_stats": lambda p, d: (
        f"{_field(d, 'word_count', 0)} words, about "
        f"{_field(d, 'estimated_reading_time', 0)} min reading time"
    ),
    "search_in_text": lambda p, d: (
        f"Found {_field(d, 'count', 0)} matches for '{p.get('pattern', '')}'"
    ),
    "replace_in_text": lambda p, d: f"Made {_field(d, 'count', 0)} replacements",
    "generate_text": lambda p, d: (
        f"Generated {len(str(_field(d, 'text', '')).split())} words of new content"
    ),
    "analyze_writing_style": lambda p, d: (
        f"Style analysis: formality {_field(d, 'formality', '?')}/100, "
        f"readability {_field(_field(d, 'readability', {}), 'grade', 'n/a')}"
    ),
    "get_writing_suggestions": lambda p, d: (
        f"Generated {len(_field(d, 'suggestions', []))} writing suggestions"
    ),
}


class Synthesizer:
    def __init__(self, llm_provider: LLMProviderProtocol, registry: ToolRegistry):
        self.llm_provider = llm_provider
        self.registry = registry
        self.logger = structlog.get_logger().bind(component="synthesizer")

    async def synthesize(
        self,
        request: str,
        executions: list[ToolExecution],
        provider_config: ProviderConfig | None = None,
    ) -> SynthesisResult:
        plan = self.continuous_operation_plan(executions)
        findings = self.research_findings(executions)

        try:
            raw = await self.llm_provider.complete(
                SYNTHESIS_SYSTEM_PROMPT,
                SYNTHESIS_USER_PROMPT.format(
                    request=request,
                    tool_names=", ".join(self.registry.names()),
                    executions=self._describe_executions(executions),
                ),
                provider_config,
            )
            data = parse_json_object(raw)
            narrative = data.get("narrative")
            if not isinstance(narrative, str) or not narrative.strip():
                raise ValueError("Synthesis reply has no narrative")
        except (ModelCallError, ValueError) as e:
            self.logger.warning("synthesis_fallback", error=str(e), executions=len(executions))
            return self.fallback(request, executions)
        except Exception as e:
            # Never let synthesis end the turn; unexpected provider errors included.
            self.logger.error("synthesis_unexpected_error", error=str(e), error_type=type(e).__name__)
            return self.fallback(request, executions)

        calls, rejected = parse_tool_calls(
            data.get("additional_tool_calls"), set(self.registry.names())
        )
        if rejected:
            self.logger.warning("synthesis_rejected_tools", tools=rejected)
        suggestions = data.get("suggested_actions")
        return SynthesisResult(
            narrative=narrative.strip(),
            suggested_actions=[str(s) for s in suggestions] if isinstance(suggestions, list) else [],
            additional_tool_calls=calls,
            continuous_operation_plan=plan,
            research_findings=findings,
        )

    def _describe_executions(self, executions: list[ToolExecution]) -> str:
        described = []
        for execution in executions:
            data = json.dumps(execution.result.data, default=str)
            if len(data) > MAX_DATA_CHARS:
                data = data[:MAX_DATA_CHARS] + "...[truncated]"
            described.append(
                {
                    "tool": execution.tool_name,
                    "parameters": execution.parameters,
                    "success": execution.success,
                    "data": data,
                    "error": execution.result.error,
                }
            )
        return json.dumps(described, indent=2, default=str)

    # ------------------------------------------------------------------
    # Deterministic tier
    # ------------------------------------------------------------------

    def fallback(self, request: str, executions: list[ToolExecution]) -> SynthesisResult:
        """Template-based synthesis; always structurally well-formed."""
        return SynthesisResult(
            narrative=self.fallback_narrative(request, executions),
            suggested_actions=self.fallback_suggestions(executions),
            additional_tool_calls=[],
            continuous_operation_plan=self.continuous_operation_plan(executions),
            research_findings=self.research_findings(executions),
            used_fallback=True,
        )

    def summarize_execution(self, execution: ToolExecution) -> str:
        result = execution.result
        template = _TEMPLATES.get(execution.tool_name)
        if template is not None:
            try:
                return template(execution.parameters, result.data)
            except (TypeError, AttributeError, KeyError) as e:
                self.logger.debug("summary_template_failed", tool=execution.tool_name, error=str(e))
        return result.message or f"Completed {execution.tool_name}"

    def fallback_narrative(self, request: str, executions: list[ToolExecution]) -> str:
        if not executions:
            return (
                f'I looked at your request ("{request}") but could not run any '
                "operations for it. Try rephrasing it or giving more detail."
            )

        successful = [e for e in executions if e.success]
        failed = [e for e in executions if not e.success]
        lines = [
            f"I completed {len(successful)} of {len(executions)} operations for your request."
        ]

        sections: dict[str, list[str]] = {}
        for execution in successful:
            sections.setdefault(category_of(execution.tool_name), []).append(
                self.summarize_execution(execution)
            )
        for category in list(TOOL_CATEGORIES) + ["other"]:
            if category in sections:
                lines.append("")
                lines.append(f"**{CATEGORY_TITLES[category]}**")
                lines.extend(f"- {line}" for line in sections[category])

        if failed:
            lines.append("")
            details = ", ".join(
                f"{e.tool_name} ({e.result.error or 'unknown error'})" for e in failed
            )
            lines.append(f"Note: {len(failed)} operations had issues: {details}")

        return "\n".join(lines)

    def fallback_suggestions(self, executions: list[ToolExecution]) -> list[str]:
        succeeded = {e.tool_name for e in executions if e.success}
        suggestions = []
        if succeeded & set(TOOL_CATEGORIES["research"]):
            suggestions.append("Review the research results and saved sources")
        if succeeded & EDITOR_MUTATIONS:
            suggestions.append("Review the changes in the editor before saving")
        if succeeded & set(TOOL_CATEGORIES["generation"]):
            suggestions.append("Apply the writing suggestions that fit your voice")
        if any(not e.success for e in executions):
            suggestions.append("Retry the failed operations with more specific details")
        if not suggestions:
            suggestions.append("Ask a more specific follow-up to continue")
        return suggestions

    def continuous_operation_plan(
        self, executions: list[ToolExecution]
    ) -> ContinuousOperationPlan | None:
        """Ordered if-chain over the successful tool types of the turn."""
        used = {e.tool_name for e in executions if e.success}

        if "web_search" in used and "scrape_webpage" not in used:
            return ContinuousOperationPlan(
                next_phase="Content Extraction",
                description="Extract detailed content from the most relevant search results",
                suggested_tools=["scrape_webpage", "save_source"],
            )
        if "scrape_webpage" in used and "create_document" not in used:
            return ContinuousOperationPlan(
                next_phase="Content Creation",
                description="Turn the extracted research into a draft document",
                suggested_tools=["create_document", "generate_text"],
            )
        if "create_document" in used and "analyze_writing_style" not in used:
            return ContinuousOperationPlan(
                next_phase="Style Analysis",
                description="Analyze the style of the new document",
                suggested_tools=["analyze_writing_style"],
            )
        if "analyze_writing_style" in used and "get_writing_suggestions" not in used:
            return ContinuousOperationPlan(
                next_phase="Content Refinement",
                description="Generate and apply targeted improvements",
                suggested_tools=["get_writing_suggestions", "improve_current_text"],
            )
        if used & EDITOR_MUTATIONS:
            return ContinuousOperationPlan(
                next_phase="Review",
                description="Review the edited text before continuing",
                suggested_tools=["get_editor_content", "analyze_writing_style"],
                autonomous_ready=False,
            )
        return None

    def research_findings(self, executions: list[ToolExecution]) -> dict[str, Any] | None:
        search_results: list[dict[str, Any]] = []
        scraped_pages: list[dict[str, Any]] = []
        saved_sources: list[str] = []

        for execution in executions:
            if not execution.success:
                continue
            data = execution.result.data
            if execution.tool_name == "web_search":
                for item in _field(data, "results", []) or []:
                    if isinstance(item, dict):
                        search_results.append(
                            {
                                "title": item.get("title", ""),
                                "url": item.get("url", ""),
                                "snippet": item.get("snippet", ""),
                            }
                        )
            elif execution.tool_name == "scrape_webpage":
                scraped_pages.append(
                    {
                        "title": _field(data, "title", ""),
                        "url": _field(data, "url", execution.parameters.get("url", "")),
                        "word_count": _field(data, "word_count", 0),
                    }
                )
            elif execution.tool_name == "save_source":
                saved_sources.append(_field(data, "name", ""))

        if not (search_results or scraped_pages or saved_sources):
            return None
        return {
            "search_results": search_results,
            "scraped_pages": scraped_pages,
            "saved_sources": saved_sources,
        }
