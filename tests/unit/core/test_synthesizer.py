"""Unit tests for the Synthesizer."""

import json

import pytest

from wordplay.core.domain.models import ToolExecution, ToolResult
from wordplay.core.domain.synthesizer import Synthesizer, category_of

from conftest import SCRAPED_PAGE, SEARCH_RESULTS


def _execution(tool, params=None, data=None, success=True, error=None):
    return ToolExecution(
        tool_name=tool,
        parameters=params or {},
        result=ToolResult(success=success, tool=tool, data=data, error=error),
    )


SEARCH = _execution(
    "web_search", {"query": "printing press"}, {"query": "printing press", **SEARCH_RESULTS}
)
SCRAPE = _execution("scrape_webpage", {"url": SCRAPED_PAGE["url"]}, SCRAPED_PAGE)


@pytest.fixture
def synthesizer(mock_llm, registry):
    return Synthesizer(mock_llm, registry)


class TestCategories:
    def test_known_and_unknown_tools(self):
        assert category_of("web_search") == "research"
        assert category_of("edit_paragraph") == "editing"
        assert category_of("made_up") == "other"


class TestFallback:
    @pytest.mark.asyncio
    async def test_model_failure_uses_templates(self, synthesizer):
        result = await synthesizer.synthesize("Research printing", [SEARCH, SCRAPE])

        assert result.used_fallback is True
        assert result.additional_tool_calls == []
        assert "I completed 2 of 2 operations" in result.narrative
        assert "**Research**" in result.narrative
        assert "Found 2 search results for 'printing press'" in result.narrative
        assert "Extracted 200 words from example.org" in result.narrative

    @pytest.mark.asyncio
    async def test_failures_are_reported(self, synthesizer):
        failed = _execution("scrape_webpage", {"url": "x"}, success=False, error="Invalid URL")

        result = await synthesizer.synthesize("Scrape", [SEARCH, failed])

        assert "Note: 1 operations had issues: scrape_webpage (Invalid URL)" in result.narrative
        assert "Retry the failed operations with more specific details" in result.suggested_actions

    def test_no_executions_narrative(self, synthesizer):
        narrative = synthesizer.fallback_narrative("do a thing", [])
        assert '"do a thing"' in narrative

    def test_unknown_tool_summary_uses_message(self, synthesizer):
        execution = ToolExecution(
            tool_name="custom_tool",
            parameters={},
            result=ToolResult(success=True, tool="custom_tool", message="Did the custom thing"),
        )
        assert synthesizer.summarize_execution(execution) == "Did the custom thing"


class TestModelTier:
    @pytest.mark.asyncio
    async def test_model_reply_is_used_and_tools_filtered(self, synthesizer, mock_llm):
        mock_llm.complete.side_effect = None
        mock_llm.complete.return_value = json.dumps(
            {
                "narrative": "The printing press spread quickly.",
                "suggested_actions": ["Draft an outline"],
                "additional_tool_calls": [
                    {"tool": "create_document", "params": {"title": "Printing"}},
                    {"tool": "launch_rocket", "params": {}},
                ],
            }
        )

        result = await synthesizer.synthesize("Research printing", [SEARCH])

        assert result.used_fallback is False
        assert result.narrative == "The printing press spread quickly."
        assert result.suggested_actions == ["Draft an outline"]
        assert [c.tool for c in result.additional_tool_calls] == ["create_document"]

    @pytest.mark.asyncio
    async def test_missing_narrative_falls_back(self, synthesizer, mock_llm):
        mock_llm.complete.side_effect = None
        mock_llm.complete.return_value = json.dumps({"suggested_actions": []})

        result = await synthesizer.synthesize("Research printing", [SEARCH])

        assert result.used_fallback is True

    @pytest.mark.asyncio
    async def test_unexpected_provider_error_falls_back(self, synthesizer, mock_llm):
        mock_llm.complete.side_effect = RuntimeError("socket closed")

        result = await synthesizer.synthesize("Research printing", [SEARCH])

        assert result.used_fallback is True


class TestContinuousOperationPlan:
    def test_search_only_suggests_extraction(self, synthesizer):
        plan = synthesizer.continuous_operation_plan([SEARCH])
        assert plan.next_phase == "Content Extraction"

    def test_scrape_suggests_content_creation(self, synthesizer):
        plan = synthesizer.continuous_operation_plan([SEARCH, SCRAPE])
        assert plan.next_phase == "Content Creation"
        assert plan.suggested_tools == ["create_document", "generate_text"]

    def test_editor_change_needs_review(self, synthesizer):
        plan = synthesizer.continuous_operation_plan([_execution("edit_paragraph", data={})])
        assert plan.next_phase == "Review"
        assert plan.autonomous_ready is False

    def test_failed_tools_are_ignored(self, synthesizer):
        failed = _execution("web_search", success=False, error="offline")
        assert synthesizer.continuous_operation_plan([failed]) is None


class TestResearchFindings:
    def test_collects_results_pages_and_sources(self, synthesizer):
        saved = _execution("save_source", data={"id": 5, "name": "Printing press - History"})

        findings = synthesizer.research_findings([SEARCH, SCRAPE, saved])

        assert [r["url"] for r in findings["search_results"]] == [
            "https://example.org/printing-press",
            "https://example.org/movable-type",
        ]
        assert findings["scraped_pages"] == [
            {
                "title": "Printing press - History",
                "url": "https://example.org/printing-press",
                "word_count": 200,
            }
        ]
        assert findings["saved_sources"] == ["Printing press - History"]

    def test_none_without_research(self, synthesizer):
        assert synthesizer.research_findings([_execution("list_projects", data=[])]) is None
