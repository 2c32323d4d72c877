"""
Cooking Tips Backend — Tip Service Unit Tests
===============================================

What:  Tests for TipService business logic.
How:   Runs against InMemoryTipStore / InMemoryUserDirectory (no database).

What we test:
    ✅ Creation sets author, display name and timestamp
    ✅ Rating aggregation and overwrite-per-user
    ✅ Ownership rules for update / delete / comments / featured
    ✅ Comment ordering and review counts
    ✅ get_user_rating never fails
    ✅ Discovery: search, category, featured, tip of the day
"""

import pytest
from unittest.mock import AsyncMock

from cooking_tips.exceptions import (
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from cooking_tips.services.tip_service import TipService


async def _tip(service, title="Keep herbs fresh", category="Storage", author="alice"):
    return await service.create(title, f"How to: {title}", category, author)


class TestTipServiceCreate:
    """Tests for create()."""

    @pytest.mark.asyncio
    async def test_create_sets_author_and_defaults(self, tip_service):
        tip = await tip_service.create("Freeze ginger", "Grate it frozen", "Prep", "alice")

        assert tip.id
        assert tip.author_id == "alice"
        assert tip.author_display_name == "Alice Baker"
        assert tip.created_at is not None
        assert tip.featured is False
        assert tip.user_ratings == {}
        assert tip.rating_count == 0
        assert tip.average_rating == 0.0
        assert tip.comments == []
        assert tip.review_count == 0

    @pytest.mark.asyncio
    async def test_create_persists_tip(self, tip_service, tip_store):
        tip = await _tip(tip_service)

        stored = await tip_store.find_by_id(tip.id)
        assert stored is not None
        assert stored.title == "Keep herbs fresh"

    @pytest.mark.asyncio
    async def test_unknown_user_display_name_falls_back_to_id(self, tip_service):
        tip = await _tip(tip_service, author="carol")
        assert tip.author_display_name == "carol"

    @pytest.mark.asyncio
    async def test_directory_failure_falls_back_to_id(self, tip_store):
        users = AsyncMock()
        users.display_name = AsyncMock(side_effect=DatabaseError())
        service = TipService(tip_store, users)

        tip = await _tip(service, author="dave")

        assert tip.author_display_name == "dave"


class TestTipServiceRating:
    """Tests for rate() and the derived rating statistics."""

    @pytest.mark.asyncio
    async def test_rating_scenario(self, tip_service):
        """A rates 4 then 2, B rates 5 → one vote each, mean 3.5."""
        tip = await _tip(tip_service)

        rated = await tip_service.rate(tip.id, 4, "alice")
        assert rated.user_ratings == {"alice": 4}

        rated = await tip_service.rate(tip.id, 2, "alice")
        assert rated.user_ratings == {"alice": 2}
        assert rated.rating_count == 1
        assert rated.average_rating == 2.0

        rated = await tip_service.rate(tip.id, 5, "bob")
        assert rated.rating_count == 2
        assert rated.average_rating == 3.5

    @pytest.mark.asyncio
    async def test_rating_is_persisted(self, tip_service, tip_store):
        tip = await _tip(tip_service)
        await tip_service.rate(tip.id, 3, "bob")

        stored = await tip_store.find_by_id(tip.id)
        assert stored.user_ratings == {"bob": 3}
        assert stored.rating_count == len(stored.user_ratings)

    @pytest.mark.asyncio
    async def test_rate_missing_tip(self, tip_service):
        with pytest.raises(NotFoundError):
            await tip_service.rate("missing", 4, "alice")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, -1])
    async def test_out_of_range_rating_rejected(self, tip_service, tip_store, rating):
        tip = await _tip(tip_service)

        with pytest.raises(ValidationError):
            await tip_service.rate(tip.id, rating, "bob")

        stored = await tip_store.find_by_id(tip.id)
        assert stored.user_ratings == {}

    @pytest.mark.asyncio
    async def test_permissive_mode_accepts_any_rating(self, tip_store, user_directory):
        service = TipService(tip_store, user_directory, strict_rating_bounds=False)
        tip = await _tip(service)

        rated = await service.rate(tip.id, 10, "bob")

        assert rated.user_ratings == {"bob": 10}
        assert rated.average_rating == 10.0


class TestTipServiceUserRating:
    """get_user_rating() always answers."""

    @pytest.mark.asyncio
    async def test_returns_stored_rating(self, tip_service):
        tip = await _tip(tip_service)
        await tip_service.rate(tip.id, 4, "bob")

        assert await tip_service.get_user_rating(tip.id, "bob") == 4

    @pytest.mark.asyncio
    async def test_unrated_user_reads_zero(self, tip_service):
        tip = await _tip(tip_service)
        assert await tip_service.get_user_rating(tip.id, "nobody") == 0

    @pytest.mark.asyncio
    async def test_missing_tip_reads_zero(self, tip_service):
        assert await tip_service.get_user_rating("missing", "bob") == 0

    @pytest.mark.asyncio
    async def test_store_failure_reads_zero(self, user_directory):
        store = AsyncMock()
        store.find_by_id = AsyncMock(side_effect=RuntimeError("connection reset"))
        service = TipService(store, user_directory)

        assert await service.get_user_rating("any", "bob") == 0


class TestTipServiceOwnership:
    """update() / delete() / set_featured() ownership rules."""

    @pytest.mark.asyncio
    async def test_author_can_update(self, tip_service):
        tip = await _tip(tip_service)

        updated = await tip_service.update(tip.id, "New", "Better", "Prep", "alice")

        assert updated.title == "New"
        assert updated.description == "Better"
        assert updated.category == "Prep"
        assert updated.created_at == tip.created_at

    @pytest.mark.asyncio
    async def test_non_author_update_changes_nothing(self, tip_service, tip_store):
        tip = await _tip(tip_service)

        result = await tip_service.update(tip.id, "Hijacked", "x", "y", "bob")

        assert result is None
        stored = await tip_store.find_by_id(tip.id)
        assert stored.title == "Keep herbs fresh"

    @pytest.mark.asyncio
    async def test_update_missing_tip_returns_none(self, tip_service):
        assert await tip_service.update("missing", "t", "d", "c", "alice") is None

    @pytest.mark.asyncio
    async def test_author_can_delete(self, tip_service, tip_store):
        tip = await _tip(tip_service)

        await tip_service.delete(tip.id, "alice")

        assert await tip_store.find_by_id(tip.id) is None

    @pytest.mark.asyncio
    async def test_non_author_delete_is_unauthorized(self, tip_service, tip_store):
        tip = await _tip(tip_service)

        with pytest.raises(UnauthorizedError):
            await tip_service.delete(tip.id, "bob")

        assert await tip_store.find_by_id(tip.id) is not None

    @pytest.mark.asyncio
    async def test_delete_missing_tip(self, tip_service):
        with pytest.raises(NotFoundError):
            await tip_service.delete("missing", "alice")

    @pytest.mark.asyncio
    async def test_admin_can_feature(self, tip_service):
        tip = await _tip(tip_service)

        featured = await tip_service.set_featured(tip.id, True, "admin")

        assert featured.featured is True

    @pytest.mark.asyncio
    async def test_author_cannot_feature_own_tip(self, tip_service):
        tip = await _tip(tip_service)

        with pytest.raises(UnauthorizedError):
            await tip_service.set_featured(tip.id, True, "alice")


class TestTipServiceComments:
    """Comment add / list / update / delete."""

    @pytest.mark.asyncio
    async def test_comments_are_newest_first(self, tip_service):
        tip = await _tip(tip_service)

        c1 = await tip_service.add_comment(tip.id, "First", 4, "alice")
        c2 = await tip_service.add_comment(tip.id, "Second", 5, "alice")

        comments = await tip_service.list_comments(tip.id)
        assert [c.id for c in comments] == [c2.id, c1.id]
        assert (await tip_service.get(tip.id)).review_count == 2

    @pytest.mark.asyncio
    async def test_comment_fields(self, tip_service):
        tip = await _tip(tip_service)

        comment = await tip_service.add_comment(tip.id, "Works great", 5, "bob")

        assert comment.id
        assert comment.author_id == "bob"
        assert comment.author_display_name == "Bob Broth"
        assert comment.text == "Works great"
        assert comment.rating == 5
        assert comment.created_at

    @pytest.mark.asyncio
    async def test_comment_rating_does_not_touch_tip_rating(self, tip_service):
        tip = await _tip(tip_service)

        await tip_service.add_comment(tip.id, "Meh", 1, "bob")

        stored = await tip_service.get(tip.id)
        assert stored.rating_count == 0
        assert stored.average_rating == 0.0

    @pytest.mark.asyncio
    async def test_unknown_commenter_is_anonymous(self, tip_service):
        tip = await _tip(tip_service)

        comment = await tip_service.add_comment(tip.id, "Hi", 3, "carol")

        assert comment.author_display_name == "Anonymous"

    @pytest.mark.asyncio
    async def test_comment_on_missing_tip(self, tip_service):
        with pytest.raises(NotFoundError):
            await tip_service.add_comment("missing", "Hi", 3, "bob")
        with pytest.raises(NotFoundError):
            await tip_service.list_comments("missing")

    @pytest.mark.asyncio
    async def test_author_updates_own_comment(self, tip_service):
        tip = await _tip(tip_service)
        comment = await tip_service.add_comment(tip.id, "Tpyo", 3, "bob")

        updated = await tip_service.update_comment(tip.id, comment.id, "Typo", 4, "bob")

        assert updated.text == "Typo"
        assert updated.rating == 4
        stored = await tip_service.list_comments(tip.id)
        assert stored[0].text == "Typo"

    @pytest.mark.asyncio
    async def test_other_user_cannot_update_comment(self, tip_service):
        tip = await _tip(tip_service)
        comment = await tip_service.add_comment(tip.id, "Mine", 3, "bob")

        with pytest.raises(UnauthorizedError):
            await tip_service.update_comment(tip.id, comment.id, "Yours now", 1, "alice")

        stored = await tip_service.list_comments(tip.id)
        assert stored[0].text == "Mine"

    @pytest.mark.asyncio
    async def test_update_unknown_comment_is_not_found(self, tip_service):
        tip = await _tip(tip_service)

        with pytest.raises(NotFoundError):
            await tip_service.update_comment(tip.id, "no-such-comment", "x", 1, "bob")

    @pytest.mark.asyncio
    async def test_delete_comment_updates_review_count(self, tip_service):
        tip = await _tip(tip_service)
        keep = await tip_service.add_comment(tip.id, "Keep", 3, "alice")
        drop = await tip_service.add_comment(tip.id, "Drop", 3, "bob")

        await tip_service.delete_comment(tip.id, drop.id, "bob")

        stored = await tip_service.get(tip.id)
        assert [c.id for c in stored.comments] == [keep.id]
        assert stored.review_count == 1

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete_comment(self, tip_service):
        tip = await _tip(tip_service)
        comment = await tip_service.add_comment(tip.id, "Mine", 3, "bob")

        with pytest.raises(UnauthorizedError):
            await tip_service.delete_comment(tip.id, comment.id, "alice")

        assert (await tip_service.get(tip.id)).review_count == 1

    @pytest.mark.asyncio
    async def test_delete_comment_on_missing_tip(self, tip_service):
        with pytest.raises(NotFoundError):
            await tip_service.delete_comment("missing", "c", "bob")


class TestTipServiceDiscovery:
    """list_mine / search / list_by_category / list_featured / tip_of_the_day."""

    @pytest.mark.asyncio
    async def test_list_mine(self, tip_service):
        await _tip(tip_service, title="A", author="alice")
        await _tip(tip_service, title="B", author="bob")

        mine = await tip_service.list_mine("alice")

        assert [t.title for t in mine] == ["A"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, tip_service):
        await _tip(tip_service, title="Keep Herbs Fresh")
        await _tip(tip_service, title="Peel garlic fast")

        found = await tip_service.search("herb")

        assert [t.title for t in found] == ["Keep Herbs Fresh"]

    @pytest.mark.asyncio
    async def test_list_by_category_is_exact(self, tip_service):
        await _tip(tip_service, title="A", category="Storage")
        await _tip(tip_service, title="B", category="Prep")

        assert [t.title for t in await tip_service.list_by_category("Prep")] == ["B"]
        assert await tip_service.list_by_category("prep") == []

    @pytest.mark.asyncio
    async def test_list_featured(self, tip_service):
        plain = await _tip(tip_service, title="Plain")
        star = await _tip(tip_service, title="Star")
        await tip_service.set_featured(star.id, True, "admin")

        featured = await tip_service.list_featured()

        assert [t.id for t in featured] == [star.id]
        assert plain.id not in [t.id for t in featured]

    @pytest.mark.asyncio
    async def test_tip_of_the_day_is_most_rated(self, tip_service):
        few = await _tip(tip_service, title="Few")
        many = await _tip(tip_service, title="Many")
        await tip_service.rate(few.id, 5, "alice")
        await tip_service.rate(many.id, 1, "alice")
        await tip_service.rate(many.id, 2, "bob")

        best = await tip_service.tip_of_the_day()

        assert best.id == many.id

    @pytest.mark.asyncio
    async def test_tip_of_the_day_tie_goes_to_first(self, tip_service):
        first = await _tip(tip_service, title="First")
        await _tip(tip_service, title="Second")

        assert (await tip_service.tip_of_the_day()).id == first.id

    @pytest.mark.asyncio
    async def test_tip_of_the_day_without_tips(self, tip_service):
        assert await tip_service.tip_of_the_day() is None

    @pytest.mark.asyncio
    async def test_get_missing_tip(self, tip_service):
        with pytest.raises(NotFoundError):
            await tip_service.get("missing")
