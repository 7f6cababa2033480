"""
Bilarn Blog Backend — Blog Record Store Tests
===============================================

Runs BlogStore against a real SQLite database (aiosqlite), plus a couple
of mock-session tests for database failure wrapping.
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.blog import Blog
from app.services.blog_store import BlogStore, parse_blog_id, validate_fields


class TestValidateFields:

    def test_all_present(self):
        validate_fields(title="t", content="c", creator="me")

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_or_blank(self, value):
        with pytest.raises(ValidationError, match="creator is required") as exc_info:
            validate_fields(title="t", content="c", creator=value)
        assert exc_info.value.field == "creator"


class TestParseBlogId:

    def test_uuid_passthrough(self):
        key = uuid.uuid4()
        assert parse_blog_id(key) is key

    def test_string_uuid(self):
        key = uuid.uuid4()
        assert parse_blog_id(str(key)) == key

    def test_malformed_is_not_found(self):
        with pytest.raises(NotFoundError):
            parse_blog_id("not-a-valid-id")


class TestBlogStoreCrud:

    def setup_method(self):
        self.store = BlogStore()

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_created_at(self, db_session):
        blog = await self.store.create(
            db_session, title="Hello", content="# Hi", creator="alice"
        )

        assert isinstance(blog.id, uuid.UUID)
        assert blog.created_at is not None
        assert blog.image_url is None
        assert blog.content == "# Hi"

    @pytest.mark.asyncio
    async def test_create_keeps_image_url(self, db_session):
        blog = await self.store.create(
            db_session,
            title="Hello",
            content="body",
            creator="alice",
            image_url="/uploads/1.png",
        )
        assert blog.image_url == "/uploads/1.png"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "content", "creator"])
    async def test_create_missing_field_persists_nothing(self, db_session, missing):
        fields = {"title": "Hello", "content": "body", "creator": "alice"}
        fields[missing] = None

        with pytest.raises(ValidationError):
            await self.store.create(db_session, **fields)

        assert await self.store.list_all(db_session) == []

    @pytest.mark.asyncio
    async def test_list_empty(self, db_session):
        assert await self.store.list_all(db_session) == []

    @pytest.mark.asyncio
    async def test_list_newest_first(self, db_session):
        base = datetime(2024, 1, 15, tzinfo=timezone.utc)
        for offset, title in [(1, "B"), (0, "A"), (2, "C")]:
            db_session.add(
                Blog(
                    title=title,
                    content="body",
                    creator="alice",
                    created_at=base + timedelta(minutes=offset),
                )
            )
        await db_session.commit()

        blogs = await self.store.list_all(db_session)
        assert [b.title for b in blogs] == ["C", "B", "A"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, db_session):
        created = await self.store.create(
            db_session, title="Hello", content="body", creator="alice"
        )

        fetched = await self.store.get_by_id(db_session, str(created.id))
        assert fetched.id == created.id
        assert fetched.title == "Hello"

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, db_session):
        with pytest.raises(NotFoundError):
            await self.store.get_by_id(db_session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, db_session):
        with pytest.raises(NotFoundError):
            await self.store.get_by_id(db_session, "12345")

    @pytest.mark.asyncio
    async def test_update_replaces_title_and_content_only(self, db_session):
        created = await self.store.create(
            db_session,
            title="Old",
            content="old body",
            creator="alice",
            image_url="/uploads/1.png",
        )
        created_at = created.created_at

        updated = await self.store.update_by_id(
            db_session, created.id, title="New", content="new body"
        )

        assert updated.title == "New"
        assert updated.content == "new body"
        assert updated.image_url == "/uploads/1.png"
        assert updated.creator == "alice"
        assert updated.created_at == created_at
        assert updated.id == created.id

    @pytest.mark.asyncio
    async def test_update_replaces_image_url_when_given(self, db_session):
        created = await self.store.create(
            db_session,
            title="Old",
            content="body",
            creator="alice",
            image_url="/uploads/1.png",
        )

        updated = await self.store.update_by_id(
            db_session, created.id, title="Old", content="body", image_url="/uploads/2.png"
        )
        assert updated.image_url == "/uploads/2.png"

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, db_session):
        with pytest.raises(NotFoundError):
            await self.store.update_by_id(
                db_session, uuid.uuid4(), title="New", content="body"
            )

    @pytest.mark.asyncio
    async def test_update_blank_title(self, db_session):
        created = await self.store.create(
            db_session, title="Old", content="body", creator="alice"
        )
        with pytest.raises(ValidationError):
            await self.store.update_by_id(db_session, created.id, title=" ", content="body")

    @pytest.mark.asyncio
    async def test_delete_then_get(self, db_session):
        created = await self.store.create(
            db_session, title="Hello", content="body", creator="alice"
        )

        await self.store.delete_by_id(db_session, created.id)

        with pytest.raises(NotFoundError):
            await self.store.get_by_id(db_session, created.id)
        with pytest.raises(NotFoundError):
            await self.store.delete_by_id(db_session, created.id)


class TestBlogStoreDatabaseErrors:

    def setup_method(self):
        self.store = BlogStore()

    @pytest.mark.asyncio
    async def test_list_failure_wrapped(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection lost"))
        )
        with pytest.raises(DatabaseError) as exc_info:
            await self.store.list_all(mock_db_session)
        assert exc_info.value.context["operation"] == "list"

    @pytest.mark.asyncio
    async def test_create_failure_rolls_back(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))
        )
        with pytest.raises(DatabaseError):
            await self.store.create(
                mock_db_session, title="t", content="c", creator="me"
            )
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_failure_wrapped(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection lost"))
        )
        with pytest.raises(DatabaseError) as exc_info:
            await self.store.get_by_id(mock_db_session, uuid.uuid4())
        assert exc_info.value.context["operation"] == "get"

    @pytest.mark.asyncio
    async def test_update_failure_rolls_back(self, mock_db_session):
        self._returns(mock_db_session, Blog(title="Old", content="body", creator="alice"))
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("UPDATE", {}, Exception("database is locked"))
        )
        with pytest.raises(DatabaseError) as exc_info:
            await self.store.update_by_id(
                mock_db_session, uuid.uuid4(), title="New", content="body"
            )
        assert exc_info.value.context["operation"] == "update"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_failure_rolls_back(self, mock_db_session):
        self._returns(mock_db_session, Blog(title="Old", content="body", creator="alice"))
        mock_db_session.delete = AsyncMock(
            side_effect=OperationalError("DELETE", {}, Exception("database is locked"))
        )
        with pytest.raises(DatabaseError) as exc_info:
            await self.store.delete_by_id(mock_db_session, uuid.uuid4())
        assert exc_info.value.context["operation"] == "delete"
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()

    @staticmethod
    def _returns(session, blog):
        result = MagicMock()
        result.scalar_one_or_none.return_value = blog
        session.execute = AsyncMock(return_value=result)
