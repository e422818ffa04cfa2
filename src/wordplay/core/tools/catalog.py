"""
Tool Catalog

The closed set of tools available to the agent, wired to its collaborators.
"""

from wordplay.core.interfaces.llm import LLMProviderProtocol
from wordplay.core.interfaces.persistence import PersistenceProtocol
from wordplay.core.interfaces.research import WebResearchProtocol
from wordplay.core.tools.base import Tool
from wordplay.core.tools.document_tools import (
    CreateDocumentTool,
    GetDocumentTool,
    ListDocumentsTool,
    UpdateDocumentTool,
)
from wordplay.core.tools.editor_tools import (
    EditCurrentDocumentTool,
    EditParagraphTool,
    EditTextWithPatternTool,
    GetEditorContentTool,
    ImproveCurrentTextTool,
    ReplaceCurrentContentTool,
)
from wordplay.core.tools.meta_tools import (
    ListMemoriesTool,
    RecallMemoryTool,
    SetGoalTool,
    StoreMemoryTool,
    UpdateGoalStatusTool,
)
from wordplay.core.tools.project_tools import (
    CreateProjectTool,
    GetProjectTool,
    ListProjectsTool,
    UpdateProjectTool,
)
from wordplay.core.tools.registry import ToolRegistry
from wordplay.core.tools.research_tools import (
    GetSourcesTool,
    SaveSourceTool,
    ScrapeWebpageTool,
    WebSearchTool,
)
from wordplay.core.tools.text_tools import (
    AnalyzeDocumentStatsTool,
    AnalyzeDocumentStructureTool,
    ReplaceInTextTool,
    SearchInTextTool,
)
from wordplay.core.tools.writing_tools import (
    AnalyzeWritingStyleTool,
    GenerateTextTool,
    GetWritingSuggestionsTool,
    ProcessTextCommandTool,
)


def default_tools(
    persistence: PersistenceProtocol,
    research: WebResearchProtocol,
    llm: LLMProviderProtocol,
) -> list[Tool]:
    return [
        # Projects
        ListProjectsTool(persistence),
        GetProjectTool(persistence),
        CreateProjectTool(persistence),
        UpdateProjectTool(persistence),
        # Documents
        ListDocumentsTool(persistence),
        GetDocumentTool(persistence),
        CreateDocumentTool(persistence),
        UpdateDocumentTool(persistence),
        # Research
        WebSearchTool(research),
        ScrapeWebpageTool(research),
        SaveSourceTool(persistence),
        GetSourcesTool(persistence),
        # Writing AI
        GenerateTextTool(llm),
        AnalyzeWritingStyleTool(llm, persistence),
        GetWritingSuggestionsTool(llm),
        ProcessTextCommandTool(llm),
        # Text processing
        AnalyzeDocumentStructureTool(),
        AnalyzeDocumentStatsTool(),
        SearchInTextTool(),
        ReplaceInTextTool(),
        # Editor
        GetEditorContentTool(),
        EditCurrentDocumentTool(),
        ReplaceCurrentContentTool(),
        EditTextWithPatternTool(),
        EditParagraphTool(),
        ImproveCurrentTextTool(llm),
        # Goals and memory
        SetGoalTool(),
        UpdateGoalStatusTool(),
        StoreMemoryTool(),
        RecallMemoryTool(),
        ListMemoriesTool(),
    ]


def build_default_registry(
    persistence: PersistenceProtocol,
    research: WebResearchProtocol,
    llm: LLMProviderProtocol,
) -> ToolRegistry:
    """Register the full catalog once; a duplicate name raises DuplicateToolError."""
    return ToolRegistry(default_tools(persistence, research, llm))
