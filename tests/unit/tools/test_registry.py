"""Unit tests for ToolRegistry and the default catalog."""

import pytest

from wordplay.core.domain.errors import DuplicateToolError, UnknownToolError
from wordplay.core.tools.catalog import default_tools
from wordplay.core.tools.registry import ToolRegistry


class TestToolRegistry:
    def test_duplicate_name_is_rejected(self, storage, mock_research, mock_llm):
        tools = default_tools(storage, mock_research, mock_llm)
        registry = ToolRegistry(tools)

        with pytest.raises(DuplicateToolError):
            registry.register(tools[0])

    def test_unknown_tool_raises(self, registry):
        with pytest.raises(UnknownToolError) as exc_info:
            registry.get("teleport")
        assert exc_info.value.name == "teleport"

    def test_contains_and_len(self, registry):
        assert "web_search" in registry
        assert "teleport" not in registry
        assert len(registry) == 31

    def test_describe_renders_json_schema(self, registry):
        described = {d["name"]: d for d in registry.describe()}

        schema = described["search_in_text"]["parameters"]
        assert schema["type"] == "object"
        assert schema["required"] == ["pattern"]
        assert schema["properties"]["case_sensitive"]["type"] == "boolean"

    def test_any_typed_parameter_has_no_type(self, registry):
        described = {d["name"]: d for d in registry.describe()}
        assert "type" not in described["store_memory"]["parameters"]["properties"]["value"]


class TestDefaultCatalog:
    def test_names_are_unique_and_complete(self, storage, mock_research, mock_llm):
        names = [t.name for t in default_tools(storage, mock_research, mock_llm)]

        assert len(names) == len(set(names)) == 31
        assert names[:4] == ["list_projects", "get_project", "create_project", "update_project"]
        for expected in (
            "web_search",
            "scrape_webpage",
            "edit_paragraph",
            "improve_current_text",
            "process_text_command",
            "set_goal",
            "list_memories",
        ):
            assert expected in names

    def test_every_tool_has_a_description(self, registry):
        for name, description, _ in registry.list():
            assert description, name
