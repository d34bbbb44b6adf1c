"""Shared machinery for the in-memory repositories.

Entities are deep-copied on the way in and out so that callers never
share mutable state with the store, and stored copies carry no pending
domain events. A single asyncio.Lock per repository serializes writes
and compare-and-swap updates.
"""

import asyncio
from copy import deepcopy
from typing import Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from .....core.entities import EventRecorder, IdentifiedEntity

E = TypeVar("E", bound=IdentifiedEntity)


class InMemoryRepository(Generic[E]):
    """Dict-backed store keyed by ``(org_id, id)``."""

    entity_type = "Entity"

    def __init__(self) -> None:
        self._items: Dict[Tuple[str, str], E] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _snapshot(entity: E) -> E:
        copy = deepcopy(entity)
        if isinstance(copy, EventRecorder):
            copy.clear_events()
        return copy

    def _iter(self, predicate: Optional[Callable[[E], bool]] = None) -> Iterator[E]:
        for item in self._items.values():
            if predicate is None or predicate(item):
                yield item

    def _select(self, predicate: Optional[Callable[[E], bool]] = None) -> List[E]:
        """Matching snapshots, oldest first. Insertion order breaks created_at ties."""
        ordered = sorted(enumerate(self._iter(predicate)), key=lambda pair: (pair[1].created_at, pair[0]))
        return [self._snapshot(item) for _, item in ordered]

    def _check_unique(self, entity: E) -> None:
        """Raise DuplicateIdentityError when ``entity`` conflicts with a stored one."""

    async def find_by_id(self, entity_id: str, org_id: str) -> Optional[E]:
        async with self._lock:
            item = self._items.get((org_id, entity_id))
            return self._snapshot(item) if item is not None else None

    async def find_all(self, org_id: str) -> List[E]:
        async with self._lock:
            return self._select(lambda item: item.org_id == org_id)

    async def exists(self, entity_id: str, org_id: str) -> bool:
        async with self._lock:
            return (org_id, entity_id) in self._items

    async def save(self, entity: E) -> E:
        async with self._lock:
            self._check_unique(entity)
            self._items[(entity.org_id, entity.id)] = self._snapshot(entity)
            return entity

    async def delete(self, entity_id: str, org_id: str) -> bool:
        async with self._lock:
            return self._items.pop((org_id, entity_id), None) is not None

    def __len__(self) -> int:
        return len(self._items)
