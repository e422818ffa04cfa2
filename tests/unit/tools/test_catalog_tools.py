"""Unit tests for the project, document, research, text, writing and meta tools."""

import json

import pytest

from wordplay.core.domain.models import GoalStatus
from wordplay.core.tools.writing_tools import normalize_metric, normalize_style_analysis


def _reply(mock_llm, payload):
    mock_llm.complete.side_effect = None
    mock_llm.complete.return_value = payload if isinstance(payload, str) else json.dumps(payload)


class TestProjectTools:
    @pytest.mark.asyncio
    async def test_create_project_defaults_style(self, tool_executor, context):
        result = await tool_executor.execute(
            "create_project", {"name": "Travel Blog", "type": "blog"}, context
        )

        assert result.success is True
        assert result.data["style"] == "neutral"
        assert result.data["user_id"] == 1

    @pytest.mark.asyncio
    async def test_get_missing_project(self, tool_executor, context):
        result = await tool_executor.execute("get_project", {"project_id": 999}, context)
        assert result.error == "Project not found"

    @pytest.mark.asyncio
    async def test_update_active_project_refreshes_context(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "update_project", {"project_id": 1, "style": "formal"}, project_context
        )

        assert result.success is True
        assert project_context.current_project["style"] == "formal"

    @pytest.mark.asyncio
    async def test_update_without_changes(self, tool_executor, context):
        result = await tool_executor.execute("update_project", {"project_id": 1}, context)
        assert result.error == "No changes given"


class TestDocumentTools:
    @pytest.mark.asyncio
    async def test_list_documents_requires_project(self, tool_executor, context):
        result = await tool_executor.execute("list_documents", {}, context)
        assert result.error == "No project specified and no active project"

    @pytest.mark.asyncio
    async def test_create_document_in_active_project(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "create_document", {"title": "Chapter 2", "content": "It was a dark night."}, project_context
        )

        assert result.success is True
        assert result.data["project_id"] == 1
        assert result.data["word_count"] == 5
        assert [d["title"] for d in project_context.project_documents] == ["Draft", "Chapter 2"]

    @pytest.mark.asyncio
    async def test_update_open_document_updates_context(self, tool_executor, project_context):
        document_id = project_context.current_document["id"]

        result = await tool_executor.execute(
            "update_document", {"document_id": document_id, "title": "Final"}, project_context
        )

        assert result.data["title"] == "Final"
        assert project_context.current_document["title"] == "Final"

    @pytest.mark.asyncio
    async def test_get_document(self, tool_executor, project_context):
        document_id = project_context.current_document["id"]
        result = await tool_executor.execute("get_document", {"document_id": document_id}, project_context)
        assert result.data["content"] == "First paragraph.\n\nSecond one."


class TestResearchTools:
    @pytest.mark.asyncio
    async def test_web_search(self, tool_executor, context, mock_research):
        result = await tool_executor.execute("web_search", {"query": "printing"}, context)

        assert result.success is True
        assert result.data["query"] == "printing"
        assert len(result.data["results"]) == 2
        mock_research.search.assert_awaited_once_with("printing", "web")

    @pytest.mark.asyncio
    async def test_web_search_error(self, tool_executor, context, mock_research):
        mock_research.search.return_value = {"results": [], "error": "Search timed out"}

        result = await tool_executor.execute("web_search", {"query": "printing"}, context)

        assert result.success is False
        assert result.error == "Search failed: Search timed out"

    @pytest.mark.asyncio
    async def test_scrape_error(self, tool_executor, context, mock_research):
        mock_research.scrape.return_value = {"url": "nope", "error": "Invalid URL"}

        result = await tool_executor.execute("scrape_webpage", {"url": "nope"}, context)

        assert result.error == "Invalid URL"

    @pytest.mark.asyncio
    async def test_save_and_get_sources(self, tool_executor, project_context):
        saved = await tool_executor.execute(
            "save_source",
            {"name": "Gutenberg notes", "type": "note", "content": "Movable type"},
            project_context,
        )
        listed = await tool_executor.execute("get_sources", {}, project_context)

        assert saved.data["type"] == "note"
        assert [s["name"] for s in listed.data] == ["Gutenberg notes"]
        assert [s["name"] for s in project_context.project_sources] == ["Gutenberg notes"]


class TestTextTools:
    @pytest.mark.asyncio
    async def test_stats_default_to_editor_text(self, tool_executor, project_context):
        result = await tool_executor.execute("analyze_document_stats", {}, project_context)
        assert result.data["word_count"] == 4
        assert result.data["paragraph_count"] == 2

    @pytest.mark.asyncio
    async def test_search_in_given_text(self, tool_executor, context):
        result = await tool_executor.execute(
            "search_in_text", {"pattern": "cat", "text": "Cat and cat"}, context
        )
        assert result.data["count"] == 2

    @pytest.mark.asyncio
    async def test_replace_in_text_leaves_editor_alone(self, tool_executor, project_context):
        result = await tool_executor.execute(
            "replace_in_text", {"pattern": "First", "replacement": "Opening"}, project_context
        )

        assert result.data["result"].startswith("Opening paragraph.")
        assert project_context.current_text().startswith("First paragraph.")

    @pytest.mark.asyncio
    async def test_invalid_pattern(self, tool_executor, context):
        result = await tool_executor.execute("search_in_text", {"pattern": "[", "text": "x"}, context)
        assert result.error.startswith("Invalid pattern")


class TestWritingTools:
    def test_normalize_metric(self):
        assert normalize_metric(0.75) == 75
        assert normalize_metric(82) == 82
        assert normalize_metric(140) == 100
        assert normalize_metric(-0.2) == 0
        assert normalize_metric("n/a") == 50

    def test_normalize_style_analysis_fills_defaults(self):
        analysis = normalize_style_analysis({"metrics": {"formality": 0.6}, "readability": {"score": 70}})

        assert analysis["formality"] == 60
        assert analysis["complexity"] == 50
        assert analysis["readability"] == {"score": 70, "grade": "General Audience"}
        assert analysis["common_phrases"] == []

    @pytest.mark.asyncio
    async def test_generate_text_uses_project_style(self, tool_executor, project_context, mock_llm):
        _reply(mock_llm, "  A fresh paragraph.  ")

        result = await tool_executor.execute("generate_text", {"prompt": "Write an intro"}, project_context)

        assert result.data == {"text": "A fresh paragraph."}
        system_prompt = mock_llm.complete.call_args.args[0]
        assert "conversational" in system_prompt

    @pytest.mark.asyncio
    async def test_analyze_style_of_stored_document(
        self, tool_executor, project_context, mock_llm, storage
    ):
        _reply(mock_llm, {"formality": 80, "complexity": 0.4, "tone_analysis": "Warm"})
        document_id = project_context.current_document["id"]

        result = await tool_executor.execute(
            "analyze_writing_style", {"document_id": document_id}, project_context
        )

        assert result.success is True
        assert result.data["formality"] == 80
        assert result.data["complexity"] == 40
        stored = await storage.get_document(document_id)
        assert stored.style_metrics["tone_analysis"] == "Warm"

    @pytest.mark.asyncio
    async def test_analyze_style_model_failure(self, tool_executor, project_context):
        result = await tool_executor.execute("analyze_writing_style", {}, project_context)

        assert result.success is False
        assert result.error.startswith("Style analysis failed")

    @pytest.mark.asyncio
    async def test_analyze_style_without_text(self, tool_executor, context):
        result = await tool_executor.execute("analyze_writing_style", {}, context)
        assert result.error == "No text to analyze"

    @pytest.mark.asyncio
    async def test_writing_suggestions(self, tool_executor, project_context, mock_llm):
        _reply(mock_llm, {"suggestions": ["Vary sentence length", "Cut filler"]})

        result = await tool_executor.execute("get_writing_suggestions", {}, project_context)

        assert result.data == {"suggestions": ["Vary sentence length", "Cut filler"]}

    @pytest.mark.asyncio
    async def test_process_text_command(self, tool_executor, project_context, mock_llm):
        _reply(mock_llm, {"result": "Summary.", "message": "Summarized the text"})

        result = await tool_executor.execute(
            "process_text_command", {"command": "summarize"}, project_context
        )

        assert result.data == {"result": "Summary.", "message": "Summarized the text"}
        assert result.message == "Summarized the text"


class TestMetaTools:
    @pytest.mark.asyncio
    async def test_goal_lifecycle(self, tool_executor, context):
        created = await tool_executor.execute(
            "set_goal", {"description": "Draft intro", "required_tools": ["generate_text"]}, context
        )
        goal_id = created.data["id"]

        started = await tool_executor.execute(
            "update_goal_status", {"goal_id": goal_id, "status": "in_progress"}, context
        )
        regressed = await tool_executor.execute(
            "update_goal_status", {"goal_id": goal_id, "status": "pending"}, context
        )

        assert created.data["status"] == "pending"
        assert started.data["status"] == "in_progress"
        assert regressed.success is False

    @pytest.mark.asyncio
    async def test_goal_with_sub_goals(self, tool_executor, context):
        created = await tool_executor.execute(
            "set_goal",
            {
                "description": "Publish essay",
                "sub_goals": ["Research sources", {"description": "Draft", "priority": 2}],
            },
            context,
        )
        sub_goals = created.data["sub_goals"]

        finished = await tool_executor.execute(
            "update_goal_status", {"goal_id": sub_goals[1]["id"], "status": "completed"}, context
        )

        assert [g["description"] for g in sub_goals] == ["Research sources", "Draft"]
        assert sub_goals[1]["priority"] == 2
        assert sub_goals[0]["status"] == "pending"
        assert finished.success is True
        assert context.current_goals[0].sub_goals[1].status == GoalStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_update_unknown_goal(self, tool_executor, context):
        result = await tool_executor.execute(
            "update_goal_status", {"goal_id": "missing", "status": "completed"}, context
        )
        assert result.success is False

    @pytest.mark.asyncio
    async def test_invalid_status(self, tool_executor, context):
        result = await tool_executor.execute(
            "update_goal_status", {"goal_id": "x", "status": "paused"}, context
        )
        assert result.success is False

    @pytest.mark.asyncio
    async def test_memory_round_trip(self, tool_executor, context):
        await tool_executor.execute(
            "store_memory", {"key": "tone", "value": {"voice": "warm"}, "category": "prefs"}, context
        )
        await tool_executor.execute("store_memory", {"key": "draft", "value": 3}, context)

        recalled = await tool_executor.execute("recall_memory", {"key": "tone"}, context)
        listed = await tool_executor.execute("list_memories", {"category": "prefs"}, context)
        missing = await tool_executor.execute("recall_memory", {"key": "nope"}, context)

        assert recalled.data["value"] == {"voice": "warm"}
        assert listed.data == [{"key": "tone", "category": "prefs", "access_count": 1}]
        assert missing.error == "No memory stored under 'nope'"
