# ============================================
# TEXT PROCESSING TOOLS
# ============================================

import re
from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.text_ops import (
    analyze_document,
    extract_structure,
    grep_text,
    replace_text,
)
from wordplay.core.tools.base import ParamSpec, ParamType, Tool

_TEXT_PARAM = ParamSpec.optional(ParamType.STRING, "Text to process (default: editor content)")


def _text(params: dict[str, Any], context: ExecutionContext) -> str:
    text = params.get("text")
    return text if text is not None else context.current_text()


class AnalyzeDocumentStructureTool(Tool):
    @property
    def name(self) -> str:
        return "analyze_document_structure"

    @property
    def description(self) -> str:
        return "Analyze the structure of a text: title, headings and paragraphs"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"text": _TEXT_PARAM}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        structure = extract_structure(_text(params, context))
        return {"success": True, "data": structure, "message": "Analyzed document structure"}


class AnalyzeDocumentStatsTool(Tool):
    @property
    def name(self) -> str:
        return "analyze_document_stats"

    @property
    def description(self) -> str:
        return "Count words, characters, sentences and paragraphs and estimate reading time"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {"text": _TEXT_PARAM}

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        stats = analyze_document(_text(params, context))
        return {
            "success": True,
            "data": stats,
            "message": f"{stats['word_count']} words, {stats['estimated_reading_time']} min read",
        }


class SearchInTextTool(Tool):
    @property
    def name(self) -> str:
        return "search_in_text"

    @property
    def description(self) -> str:
        return "Search for a regular-expression pattern within text"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "pattern": ParamSpec(ParamType.STRING, description="Regular expression"),
            "text": _TEXT_PARAM,
            "case_sensitive": ParamSpec.optional(ParamType.BOOLEAN, "Match case (default: false)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        try:
            found = grep_text(
                _text(params, context), params["pattern"], params.get("case_sensitive", False)
            )
        except re.error as e:
            return {"success": False, "error": f"Invalid pattern: {e}"}
        return {"success": True, "data": found, "message": f"Found {found['count']} matches"}


class ReplaceInTextTool(Tool):
    @property
    def name(self) -> str:
        return "replace_in_text"

    @property
    def description(self) -> str:
        return "Replace regular-expression matches in text and return the new text"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "pattern": ParamSpec(ParamType.STRING, description="Regular expression"),
            "replacement": ParamSpec(ParamType.STRING, description="Replacement text"),
            "text": _TEXT_PARAM,
            "case_sensitive": ParamSpec.optional(ParamType.BOOLEAN, "Match case (default: false)"),
            "replace_all": ParamSpec.optional(ParamType.BOOLEAN, "Replace every match (default: true)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        try:
            replaced = replace_text(
                _text(params, context),
                params["pattern"],
                params["replacement"],
                case_sensitive=params.get("case_sensitive", False),
                replace_all=params.get("replace_all", True),
            )
        except re.error as e:
            return {"success": False, "error": f"Invalid pattern: {e}"}
        return {
            "success": True,
            "data": replaced,
            "message": f"Made {replaced['count']} replacements",
        }
