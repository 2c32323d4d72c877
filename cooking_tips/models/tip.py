"""
Cooking Tips Backend — Tip SQLAlchemy Model
=============================================

What:  ORM model for the `cooking_tips` table: one row per tip document.
Why:   The tip is stored as a document. Ratings and comments live inside
       the row as JSON instead of in child tables, so a tip is always read
       and written as a whole (matching the document-store contract).
Who:   Used by SqlTipStore and by Alembic for schema management.

Column notes:
    - id: UUID string assigned by the store on first save
    - user_ratings: {"<user id>": <int rating>}, one entry per user
    - comments: list of comment objects, newest first
    - average_rating / rating_count / review_count: derived, rewritten by the
      service on every write that touches ratings or comments
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import JSON, Boolean, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from cooking_tips.database import Base


class TipRecord(Base):
    """A persisted cooking tip."""

    __tablename__ = "cooking_tips"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Storage, Prep, Substitutes, ... (open set)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    author_id: Mapped[str] = mapped_column(String(255), nullable=False)
    author_display_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user_ratings: Mapped[Dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    comments: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_cooking_tips_author_id", "author_id"),
        Index("idx_cooking_tips_category", "category"),
    )

    def __repr__(self) -> str:
        return (
            f"<TipRecord(id={self.id}, title='{self.title}', "
            f"rating_count={self.rating_count}, review_count={self.review_count})>"
        )
