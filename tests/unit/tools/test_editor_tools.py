"""Unit tests for the editor tools, driven through the ToolExecutor."""

import pytest

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.tools.editor_tools import NO_EDITOR_ERROR


class TestWithoutEditor:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tool, params",
        [
            ("get_editor_content", {}),
            ("edit_current_document", {"content": "x"}),
            ("replace_current_content", {"content": "x"}),
            ("edit_text_with_pattern", {"pattern": "a", "replacement": "b"}),
            ("edit_paragraph", {"paragraph_index": 0, "content": "x"}),
            ("improve_current_text", {}),
        ],
    )
    async def test_fails_without_open_document(self, tool_executor, tool, params):
        result = await tool_executor.execute(tool, params, ExecutionContext())
        assert result.success is False
        assert result.error == NO_EDITOR_ERROR


class TestEditorTools:
    @pytest.mark.asyncio
    async def test_get_editor_content(self, tool_executor, project_context):
        result = await tool_executor.execute("get_editor_content", {}, project_context)

        assert result.data["title"] == "Draft"
        assert result.data["content"] == "First paragraph.\n\nSecond one."
        assert result.data["word_count"] == 4

    @pytest.mark.asyncio
    async def test_append_is_default(self, tool_executor, project_context):
        await tool_executor.execute("edit_current_document", {"content": "Third."}, project_context)

        assert project_context.current_text() == "First paragraph.\n\nSecond one.\n\nThird."
        assert project_context.current_document["content"] == project_context.current_text()
        assert project_context.editor_state.has_unsaved_changes is True

    @pytest.mark.asyncio
    async def test_prepend(self, tool_executor, project_context):
        await tool_executor.execute(
            "edit_current_document", {"content": "Intro.", "operation": "prepend"}, project_context
        )
        assert project_context.current_text().startswith("Intro.\n\nFirst paragraph.")

    @pytest.mark.asyncio
    async def test_unknown_operation(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "edit_current_document", {"content": "x", "operation": "shuffle"}, project_context
        )
        assert result.success is False
        assert project_context.current_text() == "First paragraph.\n\nSecond one."

    @pytest.mark.asyncio
    async def test_replace_current_content_with_title(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "replace_current_content", {"content": "Brand new.", "title": "Fresh"}, project_context
        )

        assert result.data["title"] == "Fresh"
        assert project_context.current_document["title"] == "Fresh"
        assert project_context.current_document["word_count"] == 2

    @pytest.mark.asyncio
    async def test_edit_text_with_pattern(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "edit_text_with_pattern", {"pattern": r"\bone\b", "replacement": "two"}, project_context
        )

        assert result.data["count"] == 1
        assert project_context.current_text() == "First paragraph.\n\nSecond two."

    @pytest.mark.asyncio
    async def test_edit_text_with_invalid_pattern(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "edit_text_with_pattern", {"pattern": "(", "replacement": "x"}, project_context
        )
        assert result.success is False
        assert result.error.startswith("Invalid pattern")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, expected",
        [
            ("replace", "First paragraph.\n\nNew."),
            ("insert_before", "First paragraph.\n\nNew.\n\nSecond one."),
            ("insert_after", "First paragraph.\n\nSecond one.\n\nNew."),
            ("delete", "First paragraph."),
        ],
    )
    async def test_edit_paragraph(self, tool_executor, project_context, operation, expected):
        result = await tool_executor.execute(
            "edit_paragraph",
            {"paragraph_index": 1, "content": "New.", "operation": operation},
            project_context,
        )

        assert result.success is True
        assert project_context.current_text() == expected

    @pytest.mark.asyncio
    async def test_edit_paragraph_out_of_range(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "edit_paragraph", {"paragraph_index": 5, "content": "x"}, project_context
        )
        assert result.success is False
        assert "out of range" in result.error

    @pytest.mark.asyncio
    async def test_improve_current_text(self, tool_executor, project_context, mock_llm):
        mock_llm.complete.side_effect = None
        mock_llm.complete.return_value = "  A clearer first paragraph.\n\nA sharper second.  "

        result = await tool_executor.execute(
            "improve_current_text", {"focus": "clarity"}, project_context
        )

        assert result.success is True
        assert result.data["previous_word_count"] == 4
        assert project_context.current_text() == "A clearer first paragraph.\n\nA sharper second."

    @pytest.mark.asyncio
    async def test_improve_current_text_model_failure(self, tool_executor, project_context):
        result = await tool_executor.execute("improve_current_text", {}, project_context)

        assert result.success is False
        assert "model offline" in result.error
        assert project_context.current_text() == "First paragraph.\n\nSecond one."
