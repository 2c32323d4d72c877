"""
Cooking Tips Backend — User SQLAlchemy Model
==============================================

Read-only from this service's point of view: accounts are created by the
authentication side. Tips only need the display name behind a user id.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cooking_tips.database import Base


class User(Base):
    __tablename__ = "users"

    # Same value as the `sub` claim of the user's access token
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}')>"
