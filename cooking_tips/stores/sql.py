"""
Cooking Tips Backend — SQL Stores
===================================

What:  TipStore and UserDirectory backed by an async SQLAlchemy session.
Why:   Production persistence. Each tip is one `cooking_tips` row with its
       ratings and comments embedded as JSON, so a read returns the whole
       document and a save rewrites it.
How:   Rows are mapped to `Tip` documents on the way out and back to rows
       on save. Writes are flushed immediately so errors surface inside the
       store; the transaction is committed by `session_scope`.

Query plans:
    find_by_id:        primary key lookup
    find_by_field:     idx_cooking_tips_author_id / idx_cooking_tips_category
                       for the common filters
    find_containing:   lower(column) LIKE lower(fragment) (sequential scan)
"""

import logging
from typing import Any, List, Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cooking_tips.exceptions import DatabaseError
from cooking_tips.models.tip import TipRecord
from cooking_tips.models.user import User
from cooking_tips.schemas.tip import Comment, Tip
from cooking_tips.stores.base import (
    TipStore,
    UserDirectory,
    resolve_field,
    resolve_text_field,
)

logger = logging.getLogger(__name__)


def _to_document(record: TipRecord) -> Tip:
    return Tip(
        id=record.id,
        title=record.title,
        description=record.description,
        category=record.category,
        author_id=record.author_id,
        author_display_name=record.author_display_name,
        created_at=record.created_at,
        featured=record.featured,
        user_ratings=dict(record.user_ratings or {}),
        average_rating=record.average_rating,
        rating_count=record.rating_count,
        comments=[Comment.model_validate(c) for c in (record.comments or [])],
        review_count=record.review_count,
    )


def _apply_document(record: TipRecord, tip: Tip) -> None:
    record.title = tip.title
    record.description = tip.description
    record.category = tip.category
    record.author_id = tip.author_id
    record.author_display_name = tip.author_display_name
    if tip.created_at is not None:
        record.created_at = tip.created_at
    record.featured = tip.featured
    # Fresh containers: JSON columns only register a change on assignment
    record.user_ratings = dict(tip.user_ratings)
    record.average_rating = tip.average_rating
    record.rating_count = tip.rating_count
    record.comments = [c.model_dump(mode="json") for c in tip.comments]
    record.review_count = tip.review_count


class SqlTipStore(TipStore):
    """TipStore over the `cooking_tips` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _select(self, query) -> List[Tip]:
        try:
            result = await self.session.execute(query)
            return [_to_document(r) for r in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error querying tips: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve tips. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def find_all(self) -> List[Tip]:
        return await self._select(
            select(TipRecord).order_by(TipRecord.created_at, TipRecord.id)
        )

    async def find_by_id(self, tip_id: str) -> Optional[Tip]:
        try:
            record = await self.session.get(TipRecord, tip_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching tip %s: %s", tip_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the tip. Please try again.",
                context={"tip_id": tip_id},
            )
        return _to_document(record) if record is not None else None

    async def find_by_field(self, name: str, value: Any) -> List[Tip]:
        column = getattr(TipRecord, resolve_field(name))
        return await self._select(
            select(TipRecord)
            .where(column == value)
            .order_by(TipRecord.created_at, TipRecord.id)
        )

    async def find_containing(self, name: str, fragment: str) -> List[Tip]:
        column = getattr(TipRecord, resolve_text_field(name))
        return await self._select(
            select(TipRecord)
            .where(column.icontains(fragment, autoescape=True))
            .order_by(TipRecord.created_at, TipRecord.id)
        )

    async def save(self, tip: Tip) -> Tip:
        try:
            record = None
            if tip.id:
                record = await self.session.get(TipRecord, tip.id)
            if record is None:
                record = TipRecord(id=tip.id or str(uuid4()))
                self.session.add(record)
            _apply_document(record, tip)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving tip %s: %s", tip.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the tip. Please try again.",
                context={"tip_id": tip.id, "error_type": type(e).__name__},
            )
        return _to_document(record)

    async def delete_by_id(self, tip_id: str) -> bool:
        try:
            record = await self.session.get(TipRecord, tip_id)
            if record is None:
                return False
            await self.session.delete(record)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting tip %s: %s", tip_id, str(e))
            raise DatabaseError(
                message="Could not delete the tip. Please try again.",
                context={"tip_id": tip_id},
            )
        return True


class SqlUserDirectory(UserDirectory):
    """UserDirectory over the `users` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def display_name(self, user_id: str) -> Optional[str]:
        try:
            user = await self.session.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error looking up user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not look up the user.",
                context={"user_id": user_id},
            )
        return user.name if user is not None else None
