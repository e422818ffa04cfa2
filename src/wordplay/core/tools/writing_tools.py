# ============================================
# AI WRITING TOOLS
# ============================================

from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.errors import ModelCallError
from wordplay.core.domain.parsing import parse_json_object
from wordplay.core.domain.planner import provider_config_for
from wordplay.core.interfaces.llm import LLMProviderProtocol
from wordplay.core.interfaces.persistence import PersistenceProtocol
from wordplay.core.prompts.agent_prompts import (
    GENERATE_TEXT_SYSTEM_PROMPT,
    STYLE_ANALYSIS_SYSTEM_PROMPT,
    SUGGESTIONS_SYSTEM_PROMPT,
    TEXT_COMMAND_SYSTEM_PROMPT,
)
from wordplay.core.tools.base import ParamSpec, ParamType, Tool

STYLE_METRICS = ("formality", "complexity", "coherence", "engagement", "conciseness")


def normalize_metric(value: Any, default: int = 50) -> int:
    """Bring a model-reported metric onto the 0-100 scale (0-1 ratios are scaled up)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number <= 1:
        number *= 100
    return min(100, max(0, round(number)))


def normalize_style_analysis(raw: dict[str, Any]) -> dict[str, Any]:
    metrics = raw.get("metrics") if isinstance(raw.get("metrics"), dict) else raw
    readability = raw.get("readability") if isinstance(raw.get("readability"), dict) else {}
    phrases = raw.get("common_phrases")
    suggestions = raw.get("suggestions")
    analysis = {name: normalize_metric(metrics.get(name)) for name in STYLE_METRICS}
    analysis.update(
        {
            "readability": {
                "score": normalize_metric(readability.get("score")),
                "grade": readability.get("grade") or "General Audience",
            },
            "common_phrases": phrases if isinstance(phrases, list) else [],
            "suggestions": suggestions if isinstance(suggestions, list) else [],
            "tone_analysis": raw.get("tone_analysis") or "The text has a neutral, informative tone",
        }
    )
    return analysis


class _WritingTool(Tool):
    def __init__(self, llm: LLMProviderProtocol):
        self.llm = llm

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        context: ExecutionContext,
        json_mode: bool = False,
    ) -> str:
        return await self.llm.complete(
            system_prompt, user_prompt, provider_config_for(context, json_mode=json_mode)
        )


class GenerateTextTool(_WritingTool):
    @property
    def name(self) -> str:
        return "generate_text"

    @property
    def description(self) -> str:
        return "Generate new text content from a prompt, optionally continuing given context"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "prompt": ParamSpec(ParamType.STRING, description="What to write"),
            "context": ParamSpec.optional(ParamType.STRING, "Existing text to continue or expand"),
            "style": ParamSpec.optional(ParamType.STRING, "Target style (default: project style)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        style = params.get("style") or (context.current_project or {}).get("style") or "neutral"
        user_prompt = params["prompt"]
        if params.get("context"):
            user_prompt = f"{params['context']}\n\n{user_prompt}"
        try:
            text = await self._complete(
                GENERATE_TEXT_SYSTEM_PROMPT.format(style=style), user_prompt, context
            )
        except ModelCallError as e:
            return {"success": False, "error": f"Text generation failed: {e}"}
        return {"success": True, "data": {"text": text.strip()}, "message": "Generated text content"}


class AnalyzeWritingStyleTool(_WritingTool):
    def __init__(self, llm: LLMProviderProtocol, persistence: PersistenceProtocol):
        super().__init__(llm)
        self.persistence = persistence

    @property
    def name(self) -> str:
        return "analyze_writing_style"

    @property
    def description(self) -> str:
        return (
            "Analyze writing style metrics (formality, complexity, coherence, "
            "engagement, conciseness, readability) of text, a stored document, "
            "or the current editor content"
        )

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "text": ParamSpec.optional(ParamType.STRING, "Text to analyze"),
            "document_id": ParamSpec.optional(ParamType.INTEGER, "Stored document to analyze"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        document_id = params.get("document_id")
        text = params.get("text")
        if text is None and document_id is not None:
            document = await self.persistence.get_document(document_id)
            if document is None:
                return {"success": False, "error": "Document not found"}
            text = document.content
        if text is None:
            text = context.current_text()
        if not text.strip():
            return {"success": False, "error": "No text to analyze"}

        try:
            raw = await self._complete(STYLE_ANALYSIS_SYSTEM_PROMPT, text, context, json_mode=True)
            analysis = normalize_style_analysis(parse_json_object(raw))
        except (ModelCallError, ValueError) as e:
            return {"success": False, "error": f"Style analysis failed: {e}"}

        if document_id is not None:
            await self.persistence.update_document(document_id, {"style_metrics": analysis})
        return {"success": True, "data": analysis, "message": "Analyzed writing style"}


class GetWritingSuggestionsTool(_WritingTool):
    @property
    def name(self) -> str:
        return "get_writing_suggestions"

    @property
    def description(self) -> str:
        return "Get AI suggestions for improving text (defaults to the current editor content)"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "text": ParamSpec.optional(ParamType.STRING, "Text to improve"),
            "type": ParamSpec.optional(
                ParamType.STRING, "Suggestion type: improvement, continuation, clarity"
            ),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        text = params.get("text") or context.current_text()
        if not text.strip():
            return {"success": False, "error": "No text to improve"}
        system_prompt = SUGGESTIONS_SYSTEM_PROMPT.format(type=params.get("type", "improvement"))
        try:
            raw = await self._complete(system_prompt, text, context, json_mode=True)
            suggestions = parse_json_object(raw).get("suggestions")
        except (ModelCallError, ValueError) as e:
            return {"success": False, "error": f"Suggestion generation failed: {e}"}
        if not isinstance(suggestions, list):
            return {"success": False, "error": "Model returned no suggestions"}
        return {
            "success": True,
            "data": {"suggestions": [str(s) for s in suggestions]},
            "message": "Generated writing suggestions",
        }


class ProcessTextCommandTool(_WritingTool):
    @property
    def name(self) -> str:
        return "process_text_command"

    @property
    def description(self) -> str:
        return "Apply a natural-language text command (summarize, reformat, change tone) to text"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "command": ParamSpec(ParamType.STRING, description="The command to apply"),
            "text": ParamSpec.optional(ParamType.STRING, "Text to process (default: editor content)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        text = params.get("text") or context.current_text()
        user_prompt = f"COMMAND: {params['command']}\n\nTEXT:\n{text}"
        try:
            raw = await self._complete(TEXT_COMMAND_SYSTEM_PROMPT, user_prompt, context, json_mode=True)
            data = parse_json_object(raw)
        except (ModelCallError, ValueError) as e:
            return {"success": False, "error": f"Text command failed: {e}"}
        return {
            "success": True,
            "data": {"result": str(data.get("result", "")), "message": data.get("message", "")},
            "message": data.get("message") or "Processed text command",
        }
