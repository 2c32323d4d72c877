"""
Cooking Tips Backend — In-Memory Stores
=========================================

What:  Dict-backed TipStore and UserDirectory.
Who:   Selected with TIP_STORE_BACKEND=memory (local runs without a
       database) and used directly by the service tests.

Not shared between worker processes and lost on restart.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import uuid4

from cooking_tips.schemas.tip import Tip
from cooking_tips.stores.base import (
    TipStore,
    UserDirectory,
    resolve_field,
    resolve_text_field,
)

logger = logging.getLogger(__name__)


class InMemoryTipStore(TipStore):
    """
    TipStore over an insertion-ordered dict.

    Every read and write goes through a deep copy, so a document held by a
    caller is never the stored one. That keeps the "save to persist"
    contract identical to the SQL backend.
    """

    def __init__(self) -> None:
        self._tips: Dict[str, Tip] = {}

    async def find_all(self) -> List[Tip]:
        return [tip.model_copy(deep=True) for tip in self._tips.values()]

    async def find_by_id(self, tip_id: str) -> Optional[Tip]:
        tip = self._tips.get(tip_id)
        return tip.model_copy(deep=True) if tip is not None else None

    async def find_by_field(self, name: str, value: Any) -> List[Tip]:
        attr = resolve_field(name)
        return [
            tip.model_copy(deep=True)
            for tip in self._tips.values()
            if getattr(tip, attr) == value
        ]

    async def find_containing(self, name: str, fragment: str) -> List[Tip]:
        attr = resolve_text_field(name)
        needle = fragment.lower()
        return [
            tip.model_copy(deep=True)
            for tip in self._tips.values()
            if needle in (getattr(tip, attr) or "").lower()
        ]

    async def save(self, tip: Tip) -> Tip:
        stored = tip.model_copy(deep=True)
        if not stored.id:
            stored.id = str(uuid4())
            logger.debug("Assigned id %s to new tip", stored.id)
        self._tips[stored.id] = stored
        return stored.model_copy(deep=True)

    async def delete_by_id(self, tip_id: str) -> bool:
        return self._tips.pop(tip_id, None) is not None

    def clear(self) -> None:
        """Drop every stored tip."""
        self._tips.clear()


class InMemoryUserDirectory(UserDirectory):
    """UserDirectory over a plain `{user_id: name}` mapping."""

    def __init__(self, names: Optional[Dict[str, str]] = None) -> None:
        self._names: Dict[str, str] = dict(names or {})

    async def display_name(self, user_id: str) -> Optional[str]:
        return self._names.get(user_id)


# ── Process-wide instances for TIP_STORE_BACKEND=memory ───────────────────
memory_tip_store = InMemoryTipStore()
memory_user_directory = InMemoryUserDirectory()
