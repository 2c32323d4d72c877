"""
Cooking Tips Backend — Tip Service (Business Logic)
=====================================================

What:  Every operation on tips, ratings and comments.
Why:   Ownership rules and the derived rating/review statistics live here and
       nowhere else, independent of HTTP and of the storage backend.
How:   Each operation is a single read, or a read-modify-save, against the
       injected TipStore. The caller id is always passed in explicitly.

Derived fields, recomputed on every write that touches their source:
    rating_count   = len(user_ratings)
    average_rating = sum(user_ratings) / rating_count   (0.0 when empty)
    review_count   = len(comments)

Concurrency:
    Read-modify-save is not atomic. Two concurrent writes to the same tip
    (two ratings, a rating and a comment) race and the last save wins.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from uuid import uuid4

from cooking_tips.exceptions import (
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from cooking_tips.schemas.tip import Comment, Tip
from cooking_tips.stores.base import TipStore, UserDirectory

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
ANONYMOUS = "Anonymous"


def recompute_rating_stats(tip: Tip) -> None:
    """Rewrite `rating_count` and `average_rating` from `user_ratings`."""
    tip.rating_count = len(tip.user_ratings)
    if tip.rating_count:
        tip.average_rating = sum(tip.user_ratings.values()) / tip.rating_count
    else:
        tip.average_rating = 0.0


def recompute_review_count(tip: Tip) -> None:
    tip.review_count = len(tip.comments)


class TipService:
    """
    Business logic layer for tips.

    Collaborators:
        store:  TipStore holding the tips (source of truth, no caching here)
        users:  UserDirectory used to resolve author display names
        admin_ids:  user ids allowed to change the `featured` flag
        strict_rating_bounds:  reject tip ratings outside 1..5

    Error Handling Strategy:
        Missing tips/comments raise NotFoundError, ownership violations raise
        UnauthorizedError. Store failures (DatabaseError) propagate untouched,
        except in get_user_rating() which never fails.
    """

    def __init__(
        self,
        store: TipStore,
        users: UserDirectory,
        admin_ids: Iterable[str] = (),
        strict_rating_bounds: bool = True,
    ):
        self.store = store
        self.users = users
        self.admin_ids = frozenset(admin_ids)
        self.strict_rating_bounds = strict_rating_bounds

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _require_tip(self, tip_id: str) -> Tip:
        tip = await self.store.find_by_id(tip_id)
        if tip is None:
            raise NotFoundError(resource="tip", resource_id=tip_id)
        return tip

    async def _display_name(self, user_id: str, fallback: str) -> str:
        try:
            name = await self.users.display_name(user_id)
        except DatabaseError as e:
            logger.warning("Display name lookup for %s failed: %s", user_id, e.message)
            return fallback
        return name if name else fallback

    # ── Tips ──────────────────────────────────────────────────────────────

    async def create(
        self,
        title: str,
        description: str,
        category: str,
        caller_id: str,
    ) -> Tip:
        """
        Store a new tip authored by the caller.

        The author's display name comes from the user directory and falls
        back to the caller id when the directory has no entry.
        """
        tip = Tip(
            title=title,
            description=description,
            category=category,
            author_id=caller_id,
            author_display_name=await self._display_name(caller_id, fallback=caller_id),
            created_at=datetime.now(timezone.utc),
        )
        saved = await self.store.save(tip)
        logger.info("Tip %s created by %s (category=%s)", saved.id, caller_id, category)
        return saved

    async def get(self, tip_id: str) -> Tip:
        return await self._require_tip(tip_id)

    async def list_all(self) -> List[Tip]:
        return await self.store.find_all()

    async def list_mine(self, caller_id: str) -> List[Tip]:
        return await self.store.find_by_field("author_id", caller_id)

    async def search(self, title_fragment: str) -> List[Tip]:
        """Tips whose title contains the fragment, ignoring case."""
        return await self.store.find_containing("title", title_fragment)

    async def list_by_category(self, category: str) -> List[Tip]:
        return await self.store.find_by_field("category", category)

    async def list_featured(self) -> List[Tip]:
        return [tip for tip in await self.store.find_all() if tip.featured]

    async def tip_of_the_day(self) -> Optional[Tip]:
        """
        The most-rated tip (highest `rating_count`).

        Ties go to the first such tip in store order. None when there are
        no tips at all.
        """
        tips = await self.store.find_all()
        if not tips:
            return None
        return max(tips, key=lambda t: t.rating_count)

    async def update(
        self,
        tip_id: str,
        title: str,
        description: str,
        category: str,
        caller_id: str,
    ) -> Optional[Tip]:
        """
        Overwrite title, description and category.

        Returns None, changing nothing, when the tip does not exist or the
        caller is not its author.
        """
        tip = await self.store.find_by_id(tip_id)
        if tip is None:
            logger.info("Update of missing tip %s ignored", tip_id)
            return None
        if tip.author_id != caller_id:
            logger.warning("User %s tried to update tip %s owned by %s", caller_id, tip_id, tip.author_id)
            return None

        tip.title = title
        tip.description = description
        tip.category = category
        saved = await self.store.save(tip)
        logger.info("Tip %s updated by %s", tip_id, caller_id)
        return saved

    async def set_featured(self, tip_id: str, featured: bool, caller_id: str) -> Tip:
        """Set or clear the `featured` flag. Administrators only."""
        if caller_id not in self.admin_ids:
            logger.warning("Non-admin %s tried to change featured flag of tip %s", caller_id, tip_id)
            raise UnauthorizedError(
                message="Only administrators can feature tips",
                context={"tip_id": tip_id},
            )
        tip = await self._require_tip(tip_id)
        tip.featured = featured
        saved = await self.store.save(tip)
        logger.info("Tip %s featured=%s by %s", tip_id, featured, caller_id)
        return saved

    async def delete(self, tip_id: str, caller_id: str) -> None:
        """
        Delete a tip. Only its author may do so.

        Raises:
            NotFoundError: no such tip
            UnauthorizedError: tip exists but caller is not the author
        """
        tip = await self._require_tip(tip_id)
        if tip.author_id != caller_id:
            logger.warning("User %s tried to delete tip %s owned by %s", caller_id, tip_id, tip.author_id)
            raise UnauthorizedError(context={"tip_id": tip_id})
        await self.store.delete_by_id(tip_id)
        logger.info("Tip %s deleted by %s", tip_id, caller_id)

    # ── Ratings ───────────────────────────────────────────────────────────

    async def rate(self, tip_id: str, rating: int, rater_id: str) -> Tip:
        """
        Record `rater_id`'s rating of the tip, replacing any earlier one.

        One entry per user: rating twice overwrites, it never adds a second
        vote. The aggregate statistics are recomputed before saving.
        """
        if self.strict_rating_bounds and not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                message=f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                field="rating",
                context={"rating": rating},
            )

        tip = await self._require_tip(tip_id)
        tip.user_ratings[rater_id] = rating
        recompute_rating_stats(tip)
        saved = await self.store.save(tip)
        logger.info(
            "Tip %s rated %d by %s (count=%d, average=%.2f)",
            tip_id, rating, rater_id, saved.rating_count, saved.average_rating,
        )
        return saved

    async def get_user_rating(self, tip_id: str, user_id: str) -> int:
        """
        The rating `user_id` gave the tip, or 0.

        Never raises: a missing tip, a user who has not rated, and any
        internal failure all read as 0.
        """
        try:
            tip = await self.store.find_by_id(tip_id)
            if tip is None:
                return 0
            return tip.user_ratings.get(user_id, 0)
        except Exception as e:
            logger.warning(
                "Reading rating of tip %s for %s failed, returning 0: %s",
                tip_id, user_id, str(e),
            )
            return 0

    # ── Comments ──────────────────────────────────────────────────────────

    async def add_comment(self, tip_id: str, text: str, rating: int, caller_id: str) -> Comment:
        """Add a comment at the head of the tip's comment list."""
        tip = await self._require_tip(tip_id)
        comment = Comment(
            id=str(uuid4()),
            author_id=caller_id,
            author_display_name=await self._display_name(caller_id, fallback=ANONYMOUS),
            text=text,
            rating=rating,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        tip.comments.insert(0, comment)
        recompute_review_count(tip)
        await self.store.save(tip)
        logger.info("Comment %s added to tip %s by %s", comment.id, tip_id, caller_id)
        return comment

    async def list_comments(self, tip_id: str) -> List[Comment]:
        tip = await self._require_tip(tip_id)
        return tip.comments

    def _require_own_comment(self, tip: Tip, comment_id: str, caller_id: str) -> int:
        """Index of the comment, checking it exists and belongs to the caller."""
        for index, comment in enumerate(tip.comments):
            if comment.id != comment_id:
                continue
            if comment.author_id != caller_id:
                logger.warning(
                    "User %s tried to modify comment %s on tip %s owned by %s",
                    caller_id, comment_id, tip.id, comment.author_id,
                )
                raise UnauthorizedError(context={"tip_id": tip.id, "comment_id": comment_id})
            return index
        raise NotFoundError(resource="comment", resource_id=comment_id)

    async def update_comment(
        self,
        tip_id: str,
        comment_id: str,
        text: str,
        rating: int,
        caller_id: str,
    ) -> Comment:
        """
        Edit the text and rating of the caller's own comment.

        Raises:
            NotFoundError: no such tip, or no comment with that id on it
            UnauthorizedError: the comment belongs to someone else
        """
        tip = await self._require_tip(tip_id)
        index = self._require_own_comment(tip, comment_id, caller_id)
        comment = tip.comments[index]
        comment.text = text
        comment.rating = rating
        await self.store.save(tip)
        logger.info("Comment %s on tip %s edited by %s", comment_id, tip_id, caller_id)
        return comment

    async def delete_comment(self, tip_id: str, comment_id: str, caller_id: str) -> None:
        """Remove the caller's own comment. Same errors as update_comment()."""
        tip = await self._require_tip(tip_id)
        index = self._require_own_comment(tip, comment_id, caller_id)
        del tip.comments[index]
        recompute_review_count(tip)
        await self.store.save(tip)
        logger.info("Comment %s on tip %s deleted by %s", comment_id, tip_id, caller_id)
