"""
In-Memory Storage
=================

Implements PersistenceProtocol with plain dictionaries. Data lives for the
lifetime of the process; a default project is seeded so a fresh session has
somewhere to save documents and sources.

Thread Safety:
    Not thread-safe. All access is expected from one event loop.
"""

import itertools
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

import structlog

from wordplay.core.domain.entities import Document, Project, Source

logger = structlog.get_logger()

DEFAULT_PROJECT = {"name": "My First Project", "type": "blog", "style": "conversational"}

_PROJECT_FIELDS = {"name", "type", "style"}
_DOCUMENT_FIELDS = {"title", "content", "word_count", "style_metrics"}


class InMemoryStorage:
    """
    Dictionary-backed store for projects, documents and sources.

    Example:
        >>> storage = InMemoryStorage()
        >>> project = (await storage.list_projects(1))[0]
        >>> doc = await storage.create_document(project.id, "Draft")
    """

    def __init__(self, seed_user_id: Optional[int] = 1):
        """
        Args:
            seed_user_id: Owner of the seeded default project; None seeds nothing.
        """
        self._projects: dict[int, Project] = {}
        self._documents: dict[int, Document] = {}
        self._sources: dict[int, Source] = {}
        self._ids = itertools.count(1)
        self.logger = logger.bind(component="memory_storage")

        if seed_user_id is not None:
            project = Project(id=next(self._ids), user_id=seed_user_id, **DEFAULT_PROJECT)
            self._projects[project.id] = project

    # Projects

    async def list_projects(self, user_id: int) -> list[Project]:
        return [p for p in self._projects.values() if p.user_id == user_id]

    async def get_project(self, project_id: int) -> Optional[Project]:
        return self._projects.get(project_id)

    async def create_project(self, user_id: int, name: str, type: str, style: str) -> Project:
        project = Project(id=next(self._ids), user_id=user_id, name=name, type=type, style=style)
        self._projects[project.id] = project
        self.logger.info("project_created", project_id=project.id, name=name)
        return project

    async def update_project(self, project_id: int, changes: dict[str, Any]) -> Optional[Project]:
        project = self._projects.get(project_id)
        if project is None:
            return None
        allowed = {k: v for k, v in changes.items() if k in _PROJECT_FIELDS}
        project = replace(project, **allowed, updated_at=datetime.now())
        self._projects[project_id] = project
        return project

    async def delete_project(self, project_id: int) -> bool:
        if self._projects.pop(project_id, None) is None:
            return False
        self._documents = {k: d for k, d in self._documents.items() if d.project_id != project_id}
        self._sources = {k: s for k, s in self._sources.items() if s.project_id != project_id}
        self.logger.info("project_deleted", project_id=project_id)
        return True

    # Documents

    async def list_documents(self, project_id: int) -> list[Document]:
        return [d for d in self._documents.values() if d.project_id == project_id]

    async def get_document(self, document_id: int) -> Optional[Document]:
        return self._documents.get(document_id)

    async def create_document(
        self, project_id: int, title: str, content: str = "", word_count: int = 0
    ) -> Document:
        document = Document(
            id=next(self._ids),
            project_id=project_id,
            title=title,
            content=content,
            word_count=word_count,
        )
        self._documents[document.id] = document
        self.logger.info("document_created", document_id=document.id, project_id=project_id)
        return document

    async def update_document(self, document_id: int, changes: dict[str, Any]) -> Optional[Document]:
        document = self._documents.get(document_id)
        if document is None:
            return None
        allowed = {k: v for k, v in changes.items() if k in _DOCUMENT_FIELDS}
        document = replace(document, **allowed, updated_at=datetime.now())
        self._documents[document_id] = document
        return document

    async def delete_document(self, document_id: int) -> bool:
        return self._documents.pop(document_id, None) is not None

    # Sources

    async def list_sources(self, project_id: int) -> list[Source]:
        return [s for s in self._sources.values() if s.project_id == project_id]

    async def get_source(self, source_id: int) -> Optional[Source]:
        return self._sources.get(source_id)

    async def create_source(
        self,
        project_id: int,
        type: str,
        name: str,
        url: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Source:
        source = Source(
            id=next(self._ids),
            project_id=project_id,
            type=type,
            name=name,
            url=url,
            content=content,
        )
        self._sources[source.id] = source
        self.logger.info("source_created", source_id=source.id, project_id=project_id)
        return source

    async def delete_source(self, source_id: int) -> bool:
        return self._sources.pop(source_id, None) is not None
