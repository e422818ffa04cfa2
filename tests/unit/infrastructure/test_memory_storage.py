"""Unit tests for InMemoryStorage."""

import pytest

from wordplay.infrastructure.persistence.memory_storage import DEFAULT_PROJECT, InMemoryStorage


@pytest.mark.asyncio
class TestInMemoryStorage:
    async def test_seeds_default_project(self, storage):
        projects = await storage.list_projects(1)

        assert len(projects) == 1
        assert projects[0].id == 1
        assert projects[0].name == DEFAULT_PROJECT["name"]
        assert await storage.list_projects(2) == []

    async def test_no_seed(self):
        assert await InMemoryStorage(seed_user_id=None).list_projects(1) == []

    async def test_ids_are_shared_across_record_types(self, storage):
        document = await storage.create_document(1, "Draft")
        source = await storage.create_source(1, "url", "Wiki", url="https://example.org")
        project = await storage.create_project(1, "Novel", "novel", "literary")

        assert [document.id, source.id, project.id] == [2, 3, 4]

    async def test_update_ignores_unknown_fields(self, storage):
        project = await storage.update_project(1, {"style": "formal", "user_id": 99})

        assert project.style == "formal"
        assert project.user_id == 1
        assert (await storage.get_project(1)).style == "formal"

    async def test_update_missing_record(self, storage):
        assert await storage.update_project(42, {"name": "x"}) is None
        assert await storage.update_document(42, {"title": "x"}) is None

    async def test_update_document_content(self, storage):
        document = await storage.create_document(1, "Draft", "old")

        updated = await storage.update_document(
            document.id, {"content": "new words here", "word_count": 3}
        )

        assert updated.content == "new words here"
        assert updated.word_count == 3
        assert updated.updated_at >= document.updated_at

    async def test_delete_project_cascades(self, storage):
        await storage.create_document(1, "Draft")
        await storage.create_source(1, "note", "Idea")

        assert await storage.delete_project(1) is True
        assert await storage.list_documents(1) == []
        assert await storage.list_sources(1) == []
        assert await storage.delete_project(1) is False

    async def test_delete_document_and_source(self, storage):
        document = await storage.create_document(1, "Draft")
        source = await storage.create_source(1, "note", "Idea")

        assert await storage.delete_document(document.id) is True
        assert await storage.delete_source(source.id) is True
        assert await storage.get_document(document.id) is None
        assert await storage.get_source(source.id) is None
