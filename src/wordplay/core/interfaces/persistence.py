"""
Persistence Protocol

CRUD over projects, documents and sources. Consumed by the project, document
and research tools and by ExecutionContext when the active project changes.
"""

from typing import Any, Protocol

from wordplay.core.domain.entities import Document, Project, Source


class PersistenceProtocol(Protocol):
    async def list_projects(self, user_id: int) -> list[Project]: ...

    async def get_project(self, project_id: int) -> Project | None: ...

    async def create_project(
        self, user_id: int, name: str, type: str, style: str
    ) -> Project: ...

    async def update_project(
        self, project_id: int, changes: dict[str, Any]
    ) -> Project | None: ...

    async def delete_project(self, project_id: int) -> bool: ...

    async def list_documents(self, project_id: int) -> list[Document]: ...

    async def get_document(self, document_id: int) -> Document | None: ...

    async def create_document(
        self, project_id: int, title: str, content: str = "", word_count: int = 0
    ) -> Document: ...

    async def update_document(
        self, document_id: int, changes: dict[str, Any]
    ) -> Document | None: ...

    async def delete_document(self, document_id: int) -> bool: ...

    async def list_sources(self, project_id: int) -> list[Source]: ...

    async def get_source(self, source_id: int) -> Source | None: ...

    async def create_source(
        self,
        project_id: int,
        type: str,
        name: str,
        url: str | None = None,
        content: str | None = None,
    ) -> Source: ...

    async def delete_source(self, source_id: int) -> bool: ...
