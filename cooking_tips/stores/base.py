"""
Cooking Tips Backend — Abstract Store Interfaces
==================================================

What:  Contracts for tip persistence and display-name lookup.
Why:   The Tip Service receives its collaborators explicitly, so the same
       business logic runs against PostgreSQL in production and a dict in
       tests without any patching.
How:   Concrete backends inherit from TipStore / UserDirectory and implement
       every abstract coroutine.

Contract shared by all TipStore backends:
    - Documents returned by a store are copies. Mutating one changes nothing
      until it is passed back to save().
    - save() assigns a random UUID string id when the tip has none.
    - Field names may be given in either spelling (`authorId` / `author_id`).
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from cooking_tips.exceptions import ValidationError
from cooking_tips.schemas.tip import Tip

# API spelling and attribute spelling → Tip attribute
QUERYABLE_FIELDS = {
    "authorId": "author_id",
    "author_id": "author_id",
    "category": "category",
    "featured": "featured",
    "title": "title",
}

TEXT_FIELDS = {
    "title": "title",
    "description": "description",
}


def resolve_field(name: str) -> str:
    """Map a field name to the Tip attribute usable for exact-match lookups."""
    try:
        return QUERYABLE_FIELDS[name]
    except KeyError:
        raise ValidationError(
            message=f"Cannot query tips by field '{name}'",
            field=name,
            context={"allowed": sorted(QUERYABLE_FIELDS)},
        )


def resolve_text_field(name: str) -> str:
    """Map a field name to a Tip text attribute usable for substring search."""
    try:
        return TEXT_FIELDS[name]
    except KeyError:
        raise ValidationError(
            message=f"Cannot search tips by field '{name}'",
            field=name,
            context={"allowed": sorted(TEXT_FIELDS)},
        )


class TipStore(ABC):
    """
    Document store for tips, keyed by tip id.

    Implementations:
        - SqlTipStore: SQLAlchemy async session, `cooking_tips` table
        - InMemoryTipStore: insertion-ordered dict
    """

    @abstractmethod
    async def find_all(self) -> List[Tip]:
        """Every tip, in the backend's natural order."""
        ...

    @abstractmethod
    async def find_by_id(self, tip_id: str) -> Optional[Tip]:
        """The tip with this id, or None."""
        ...

    @abstractmethod
    async def find_by_field(self, name: str, value: Any) -> List[Tip]:
        """
        Tips whose field `name` equals `value` exactly.

        Raises:
            ValidationError: `name` is not a queryable field.
        """
        ...

    @abstractmethod
    async def find_containing(self, name: str, fragment: str) -> List[Tip]:
        """
        Tips whose text field `name` contains `fragment`, ignoring case.

        Raises:
            ValidationError: `name` is not a searchable text field.
        """
        ...

    @abstractmethod
    async def save(self, tip: Tip) -> Tip:
        """Insert or overwrite the tip; returns the stored copy (with its id)."""
        ...

    @abstractmethod
    async def delete_by_id(self, tip_id: str) -> bool:
        """Remove the tip. Returns False if there was nothing to remove."""
        ...


class UserDirectory(ABC):
    """Resolves user ids to human-readable names."""

    @abstractmethod
    async def display_name(self, user_id: str) -> Optional[str]:
        """The user's name, or None when the directory has no such user."""
        ...
