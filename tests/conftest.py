"""Shared fixtures: real registry and storage, mocked model and web research."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from wordplay.core.domain.agent import WordPlayAgent
from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.errors import ModelCallError
from wordplay.core.domain.orchestrator import AutonomousLoop
from wordplay.core.domain.planner import Planner
from wordplay.core.domain.reflector import Reflector
from wordplay.core.domain.synthesizer import Synthesizer
from wordplay.core.tools.catalog import build_default_registry
from wordplay.core.tools.executor import ToolExecutor
from wordplay.infrastructure.persistence.memory_storage import InMemoryStorage

SEARCH_RESULTS = {
    "results": [
        {
            "title": "Printing press - History",
            "snippet": "Gutenberg introduced movable type around 1440.",
            "url": "https://example.org/printing-press",
        },
        {
            "title": "Movable type",
            "snippet": "Movable type is the system of printing...",
            "url": "https://example.org/movable-type",
        },
    ],
    "summary": "Gutenberg introduced movable type around 1440.",
}

SCRAPED_PAGE = {
    "title": "Printing press - History",
    "content": "The printing press changed Europe. " * 40,
    "word_count": 200,
    "domain": "example.org",
    "url": "https://example.org/printing-press",
}


@pytest.fixture
def storage():
    """In-memory storage seeded with one project (id 1) for user 1."""
    return InMemoryStorage()


@pytest.fixture
def mock_llm():
    """Mock LLMProviderProtocol; offline unless a test sets a reply."""
    mock = AsyncMock()
    mock.complete.side_effect = ModelCallError("model offline", "APIConnectionError")
    return mock


@pytest.fixture
def mock_research():
    """Mock WebResearchProtocol with one canned search and page."""
    mock = AsyncMock()
    mock.search.return_value = SEARCH_RESULTS
    mock.scrape.return_value = SCRAPED_PAGE
    return mock


@pytest.fixture
def registry(storage, mock_research, mock_llm):
    return build_default_registry(storage, mock_research, mock_llm)


@pytest.fixture
def tool_executor(registry):
    return ToolExecutor(registry)


@pytest.fixture
def context(storage):
    return ExecutionContext(persistence=storage)


@pytest_asyncio.fixture
async def project_context(storage):
    """Context with the seeded project active and a document open in the editor."""
    context = ExecutionContext(persistence=storage)
    project = (await storage.list_projects(1))[0]
    document = await storage.create_document(project.id, "Draft", "First paragraph.\n\nSecond one.")
    await context.update(
        {
            "current_project": project.to_dict(),
            "current_document": document.to_dict(),
            "editor_state": {"title": "Draft", "content": document.content},
        }
    )
    return context


@pytest.fixture
def agent(registry, tool_executor, mock_llm, storage):
    """Fully wired agent over the mocked model and research collaborators."""
    loop = AutonomousLoop(
        tool_executor,
        Planner(mock_llm, registry),
        Reflector(mock_llm),
        Synthesizer(mock_llm, registry),
    )
    return WordPlayAgent(
        registry=registry, tool_executor=tool_executor, loop=loop, persistence=storage
    )
