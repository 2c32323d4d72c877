"""
Cooking Tips Backend — Document Store Tests
=============================================

What:  Contract tests for the TipStore / UserDirectory backends.
How:   InMemoryTipStore directly; SqlTipStore against an in-memory SQLite
       database (aiosqlite) with the tables created from the ORM metadata.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cooking_tips.database import Base
from cooking_tips.exceptions import ValidationError
from cooking_tips.models.tip import TipRecord  # noqa: F401  (registers table)
from cooking_tips.models.user import User
from cooking_tips.schemas.tip import Comment, Tip
from cooking_tips.stores.memory import InMemoryTipStore, InMemoryUserDirectory
from cooking_tips.stores.sql import SqlTipStore, SqlUserDirectory


def _new_tip(**overrides) -> Tip:
    data = {
        "title": "Keep herbs fresh",
        "description": "Stand them in water like flowers",
        "category": "Storage",
        "author_id": "alice",
        "author_display_name": "Alice Baker",
    }
    data.update(overrides)
    return Tip(**data)


@pytest_asyncio.fixture
async def sql_session():
    """One AsyncSession over a throwaway in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store_kind(request):
    return request.param


@pytest.fixture
def store(store_kind, sql_session):
    if store_kind == "memory":
        return InMemoryTipStore()
    return SqlTipStore(sql_session)


class TestTipStoreContract:
    """Behaviour every TipStore backend shares."""

    @pytest.mark.asyncio
    async def test_save_assigns_id(self, store):
        saved = await store.save(_new_tip())

        assert saved.id
        assert (await store.find_by_id(saved.id)).title == "Keep herbs fresh"

    @pytest.mark.asyncio
    async def test_save_keeps_existing_id(self, store):
        saved = await store.save(_new_tip(id="fixed-id"))
        assert saved.id == "fixed-id"

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, store):
        assert await store.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_save_overwrites(self, store):
        saved = await store.save(_new_tip())
        saved.title = "Changed"
        saved.user_ratings["bob"] = 4
        saved.rating_count = 1
        saved.average_rating = 4.0

        await store.save(saved)

        stored = await store.find_by_id(saved.id)
        assert stored.title == "Changed"
        assert stored.user_ratings == {"bob": 4}
        assert stored.rating_count == 1
        assert len(await store.find_all()) == 1

    @pytest.mark.asyncio
    async def test_embedded_comments_round_trip(self, store):
        comment = Comment(
            id="c1",
            author_id="bob",
            author_display_name="Bob Broth",
            text="Works",
            rating=5,
            created_at="2024-05-01T10:00:00+00:00",
        )
        saved = await store.save(_new_tip(comments=[comment], review_count=1))

        stored = await store.find_by_id(saved.id)

        assert stored.comments == [comment]
        assert stored.review_count == 1

    @pytest.mark.asyncio
    async def test_find_by_field_accepts_both_spellings(self, store):
        await store.save(_new_tip(author_id="alice"))
        await store.save(_new_tip(author_id="bob"))

        assert len(await store.find_by_field("authorId", "alice")) == 1
        assert len(await store.find_by_field("author_id", "bob")) == 1

    @pytest.mark.asyncio
    async def test_find_by_field_is_exact(self, store):
        await store.save(_new_tip(category="Storage"))

        assert len(await store.find_by_field("category", "Storage")) == 1
        assert await store.find_by_field("category", "Stor") == []

    @pytest.mark.asyncio
    async def test_find_by_unknown_field_rejected(self, store):
        with pytest.raises(ValidationError):
            await store.find_by_field("userRatings", "x")

    @pytest.mark.asyncio
    async def test_find_containing_ignores_case(self, store):
        await store.save(_new_tip(title="Keep Herbs Fresh"))
        await store.save(_new_tip(title="Peel garlic"))

        found = await store.find_containing("title", "HERB")

        assert [t.title for t in found] == ["Keep Herbs Fresh"]

    @pytest.mark.asyncio
    async def test_find_containing_treats_wildcards_literally(self, store):
        await store.save(_new_tip(title="100% butter"))
        await store.save(_new_tip(title="Plain"))

        assert [t.title for t in await store.find_containing("title", "%")] == ["100% butter"]

    @pytest.mark.asyncio
    async def test_find_containing_unknown_field_rejected(self, store):
        with pytest.raises(ValidationError):
            await store.find_containing("category", "x")

    @pytest.mark.asyncio
    async def test_delete_by_id(self, store):
        saved = await store.save(_new_tip())

        assert await store.delete_by_id(saved.id) is True
        assert await store.find_by_id(saved.id) is None
        assert await store.delete_by_id(saved.id) is False


class TestInMemoryTipStore:
    """Copy semantics specific to the dict backend."""

    def setup_method(self):
        self.store = InMemoryTipStore()

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self):
        saved = await self.store.save(_new_tip())
        fetched = await self.store.find_by_id(saved.id)

        fetched.title = "Mutated"
        fetched.user_ratings["bob"] = 1

        stored = await self.store.find_by_id(saved.id)
        assert stored.title == "Keep herbs fresh"
        assert stored.user_ratings == {}

    @pytest.mark.asyncio
    async def test_save_does_not_alias_argument(self):
        tip = _new_tip()
        saved = await self.store.save(tip)

        tip.title = "Mutated after save"

        assert (await self.store.find_by_id(saved.id)).title == "Keep herbs fresh"

    @pytest.mark.asyncio
    async def test_find_all_keeps_insertion_order(self):
        for title in ("one", "two", "three"):
            await self.store.save(_new_tip(title=title))

        assert [t.title for t in await self.store.find_all()] == ["one", "two", "three"]

    @pytest.mark.asyncio
    async def test_clear(self):
        await self.store.save(_new_tip())
        self.store.clear()
        assert await self.store.find_all() == []


class TestUserDirectories:

    @pytest.mark.asyncio
    async def test_memory_directory(self):
        users = InMemoryUserDirectory({"alice": "Alice Baker"})

        assert await users.display_name("alice") == "Alice Baker"
        assert await users.display_name("nobody") is None

    @pytest.mark.asyncio
    async def test_sql_directory(self, sql_session):
        sql_session.add(User(id="alice", name="Alice Baker"))
        await sql_session.flush()
        users = SqlUserDirectory(sql_session)

        assert await users.display_name("alice") == "Alice Baker"
        assert await users.display_name("nobody") is None
