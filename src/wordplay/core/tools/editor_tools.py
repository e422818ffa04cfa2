# ============================================
# EDITOR TOOLS
# ============================================
# Tools that read or rewrite the text currently open in the editor. Every
# mutation goes through ExecutionContext.set_editor_content so the active
# document always mirrors the editor.

import re
from dataclasses import asdict
from typing import Any

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.errors import ModelCallError
from wordplay.core.domain.planner import provider_config_for
from wordplay.core.domain.text_ops import count_words, replace_text, split_paragraphs
from wordplay.core.interfaces.llm import LLMProviderProtocol
from wordplay.core.prompts.agent_prompts import IMPROVE_TEXT_SYSTEM_PROMPT
from wordplay.core.tools.base import ParamSpec, ParamType, Tool

NO_EDITOR_ERROR = "No document is open in the editor"

EDIT_OPERATIONS = ("append", "prepend", "replace")
PARAGRAPH_OPERATIONS = ("replace", "insert_before", "insert_after", "delete")


def _has_editor(context: ExecutionContext) -> bool:
    return context.editor_state is not None or context.current_document is not None


def _snapshot(context: ExecutionContext) -> dict[str, Any]:
    return asdict(context.editor_state) if context.editor_state else {}


class GetEditorContentTool(Tool):
    @property
    def name(self) -> str:
        return "get_editor_content"

    @property
    def description(self) -> str:
        return "Read the title and text currently open in the editor"

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        if not _has_editor(context):
            return {"success": False, "error": NO_EDITOR_ERROR}
        content = context.current_text()
        if context.editor_state is not None:
            data = _snapshot(context)
        else:
            data = {
                "title": context.current_document.get("title", ""),
                "content": content,
                "word_count": count_words(content),
                "has_unsaved_changes": False,
            }
        return {"success": True, "data": data, "message": f"Editor holds {data['word_count']} words"}


class EditCurrentDocumentTool(Tool):
    @property
    def name(self) -> str:
        return "edit_current_document"

    @property
    def description(self) -> str:
        return "Append, prepend or replace text in the document open in the editor"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "content": ParamSpec(ParamType.STRING, description="Text to add"),
            "operation": ParamSpec.optional(
                ParamType.STRING, "One of append, prepend, replace (default: append)"
            ),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        if not _has_editor(context):
            return {"success": False, "error": NO_EDITOR_ERROR}
        operation = params.get("operation", "append")
        if operation not in EDIT_OPERATIONS:
            return {"success": False, "error": f"Unknown operation '{operation}'"}

        current = context.current_text()
        content = params["content"]
        if operation == "append":
            updated = f"{current.rstrip()}\n\n{content}" if current.strip() else content
        elif operation == "prepend":
            updated = f"{content}\n\n{current.lstrip()}" if current.strip() else content
        else:
            updated = content

        context.set_editor_content(updated)
        return {
            "success": True,
            "data": _snapshot(context),
            "message": f"Applied {operation} to the current document",
        }


class ReplaceCurrentContentTool(Tool):
    @property
    def name(self) -> str:
        return "replace_current_content"

    @property
    def description(self) -> str:
        return "Replace the whole editor content (and optionally the title) with new text"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "content": ParamSpec(ParamType.STRING, description="New document text"),
            "title": ParamSpec.optional(ParamType.STRING, "New title"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        if not _has_editor(context):
            return {"success": False, "error": NO_EDITOR_ERROR}
        state = context.set_editor_content(params["content"], title=params.get("title"))
        return {
            "success": True,
            "data": _snapshot(context),
            "message": f"Replaced document content ({state.word_count} words)",
        }


class EditTextWithPatternTool(Tool):
    @property
    def name(self) -> str:
        return "edit_text_with_pattern"

    @property
    def description(self) -> str:
        return "Find and replace a regular-expression pattern in the editor content"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "pattern": ParamSpec(ParamType.STRING, description="Regular expression to find"),
            "replacement": ParamSpec(ParamType.STRING, description="Replacement text"),
            "case_sensitive": ParamSpec.optional(ParamType.BOOLEAN, "Match case (default: false)"),
            "replace_all": ParamSpec.optional(ParamType.BOOLEAN, "Replace every match (default: true)"),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        if not _has_editor(context):
            return {"success": False, "error": NO_EDITOR_ERROR}
        try:
            replaced = replace_text(
                context.current_text(),
                params["pattern"],
                params["replacement"],
                case_sensitive=params.get("case_sensitive", False),
                replace_all=params.get("replace_all", True),
            )
        except re.error as e:
            return {"success": False, "error": f"Invalid pattern: {e}"}

        if replaced["count"]:
            context.set_editor_content(replaced["result"])
        return {
            "success": True,
            "data": {"count": replaced["count"], **_snapshot(context)},
            "message": f"Made {replaced['count']} replacements in the current document",
        }


class EditParagraphTool(Tool):
    @property
    def name(self) -> str:
        return "edit_paragraph"

    @property
    def description(self) -> str:
        return "Replace, insert around, or delete one paragraph (0-based index) of the editor content"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "paragraph_index": ParamSpec(ParamType.INTEGER, description="0-based paragraph index"),
            "content": ParamSpec.optional(ParamType.STRING, "Paragraph text (not needed for delete)"),
            "operation": ParamSpec.optional(
                ParamType.STRING,
                "One of replace, insert_before, insert_after, delete (default: replace)",
            ),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        if not _has_editor(context):
            return {"success": False, "error": NO_EDITOR_ERROR}
        operation = params.get("operation", "replace")
        if operation not in PARAGRAPH_OPERATIONS:
            return {"success": False, "error": f"Unknown operation '{operation}'"}
        if operation != "delete" and "content" not in params:
            return {"success": False, "error": f"'content' is required for {operation}"}

        paragraphs = split_paragraphs(context.current_text())
        index = params["paragraph_index"]
        if not 0 <= index < len(paragraphs):
            return {
                "success": False,
                "error": f"Paragraph {index} out of range (document has {len(paragraphs)})",
            }

        if operation == "replace":
            paragraphs[index] = params["content"]
        elif operation == "insert_before":
            paragraphs.insert(index, params["content"])
        elif operation == "insert_after":
            paragraphs.insert(index + 1, params["content"])
        else:
            del paragraphs[index]

        context.set_editor_content("\n\n".join(paragraphs))
        return {
            "success": True,
            "data": {"paragraph_count": len(paragraphs), **_snapshot(context)},
            "message": f"Applied {operation} to paragraph {index}",
        }


class ImproveCurrentTextTool(Tool):
    def __init__(self, llm: LLMProviderProtocol):
        self.llm = llm

    @property
    def name(self) -> str:
        return "improve_current_text"

    @property
    def description(self) -> str:
        return "Rewrite the editor content to improve quality, keeping its meaning"

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        return {
            "focus": ParamSpec.optional(
                ParamType.STRING, "What to improve, e.g. clarity, grammar, professional tone"
            ),
        }

    async def execute(self, params: dict[str, Any], context: ExecutionContext) -> dict[str, Any]:
        if not _has_editor(context):
            return {"success": False, "error": NO_EDITOR_ERROR}
        text = context.current_text()
        if not text.strip():
            return {"success": False, "error": "The editor is empty"}

        focus = params.get("focus", "clarity and flow")
        try:
            improved = await self.llm.complete(
                IMPROVE_TEXT_SYSTEM_PROMPT.format(focus=focus), text, provider_config_for(context)
            )
        except ModelCallError as e:
            return {"success": False, "error": f"Text improvement failed: {e}"}
        if not improved.strip():
            return {"success": False, "error": "Model returned empty text"}

        previous_words = count_words(text)
        context.set_editor_content(improved.strip())
        return {
            "success": True,
            "data": {"focus": focus, "previous_word_count": previous_words, **_snapshot(context)},
            "message": f"Improved the current text ({focus})",
        }
