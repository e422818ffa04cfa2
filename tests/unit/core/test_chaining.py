"""Unit tests for the follow-up tool heuristics."""

from wordplay.core.domain.chaining import SCRAPE_ANALYSIS_CHARS, next_tools
from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.models import ToolResult

SEARCH_DATA = {
    "query": "printing press",
    "results": [{"title": "Printing", "snippet": "Gutenberg...", "url": "https://example.org/a"}],
}


def _ok(tool, data):
    return ToolResult(success=True, tool=tool, data=data)


class TestNextTools:
    def test_failed_result_never_chains(self):
        context = ExecutionContext(current_project={"id": 1})
        failed = ToolResult(success=False, tool="web_search", error="offline")
        assert next_tools("web_search", failed, context) == []

    def test_search_chains_scrape_and_save_with_project(self):
        context = ExecutionContext(current_project={"id": 1, "name": "P"})

        calls = next_tools("web_search", _ok("web_search", SEARCH_DATA), context)

        assert [c.tool for c in calls] == ["scrape_webpage", "save_source"]
        assert calls[0].params == {"url": "https://example.org/a"}
        assert calls[1].params == {
            "project_id": 1,
            "type": "url",
            "name": "Printing",
            "url": "https://example.org/a",
            "content": "Gutenberg...",
        }

    def test_search_without_project_only_scrapes(self):
        calls = next_tools("web_search", _ok("web_search", SEARCH_DATA), ExecutionContext())
        assert [c.tool for c in calls] == ["scrape_webpage"]

    def test_search_without_results_chains_nothing(self):
        data = {"query": "x", "results": []}
        assert next_tools("web_search", _ok("web_search", data), ExecutionContext()) == []

    def test_scrape_chains_structure_analysis_on_truncated_content(self):
        content = "word " * 2000
        calls = next_tools(
            "scrape_webpage", _ok("scrape_webpage", {"content": content}), ExecutionContext()
        )

        assert [c.tool for c in calls] == ["analyze_document_structure"]
        assert len(calls[0].params["text"]) == SCRAPE_ANALYSIS_CHARS

    def test_create_document_chains_style_analysis(self):
        context = ExecutionContext(current_project={"id": 1})
        calls = next_tools("create_document", _ok("create_document", {"id": 9}), context)
        assert [(c.tool, c.params) for c in calls] == [("analyze_writing_style", {"document_id": 9})]

    def test_create_document_without_project_chains_nothing(self):
        calls = next_tools("create_document", _ok("create_document", {"id": 9}), ExecutionContext())
        assert calls == []

    def test_style_analysis_chains_suggestions_for_open_document(self):
        context = ExecutionContext(current_document={"id": 2, "content": "Some text"})
        calls = next_tools("analyze_writing_style", _ok("analyze_writing_style", {}), context)
        assert [(c.tool, c.params) for c in calls] == [
            ("get_writing_suggestions", {"text": "Some text", "type": "improvement"})
        ]

    def test_other_tools_do_not_chain(self):
        assert next_tools("list_projects", _ok("list_projects", []), ExecutionContext()) == []
