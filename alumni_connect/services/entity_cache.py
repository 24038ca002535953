"""Per-view, in-memory mirror of posts or replies.

Every operation is synchronous and touches nothing but the collection, so a
cache can be mutated from any coroutine without interleaving. Each cache also
carries the mutation locks for the entities it holds: two views never share a
lock, just as they never share entities.
"""
from __future__ import annotations

from typing import Any, Generic, Iterable, Protocol, TypeVar


class _Identified(Protocol):
    id: str

    def model_copy(self, *, update: dict[str, Any] | None = None, deep: bool = False) -> Any: ...


EntityT = TypeVar("EntityT", bound=_Identified)


class MutationLocks:
    """In-flight flags keyed by ``(entity_id, kind)``."""

    def __init__(self) -> None:
        self._held: set[tuple[str, str]] = set()

    def acquire(self, entity_id: str, kind: str) -> bool:
        key = (entity_id, kind)
        if key in self._held:
            return False
        self._held.add(key)
        return True

    def release(self, entity_id: str, kind: str) -> None:
        self._held.discard((entity_id, kind))

    def is_held(self, entity_id: str, kind: str) -> bool:
        return (entity_id, kind) in self._held

    def clear(self) -> None:
        self._held.clear()

    def __len__(self) -> int:
        return len(self._held)


class EntityCache(Generic[EntityT]):
    """Ordered collection of entities addressed by their ``id``."""

    def __init__(self, entities: Iterable[EntityT] = ()) -> None:
        self._items: list[EntityT] = []
        self.locks = MutationLocks()
        self.load(entities)

    def load(self, entities: Iterable[EntityT]) -> None:
        """Replace the whole collection, keeping the given order."""

        self._items = list(entities)

    def upsert(self, entity: EntityT, *, prepend: bool = False) -> None:
        """Replace in place when the id is known; otherwise insert.

        New entities are appended unless ``prepend`` is set.
        """

        index = self._index_of(entity.id)
        if index is not None:
            self._items[index] = entity
        elif prepend:
            self._items.insert(0, entity)
        else:
            self._items.append(entity)

    def insert(self, index: int, entity: EntityT) -> None:
        """Put ``entity`` back at ``index``; used when an early removal is undone."""

        if self._index_of(entity.id) is not None:
            self.upsert(entity)
            return
        self._items.insert(min(max(index, 0), len(self._items)), entity)

    def remove(self, entity_id: str) -> EntityT | None:
        index = self._index_of(entity_id)
        if index is None:
            return None
        return self._items.pop(index)

    def patch(self, entity_id: str, **fields: Any) -> EntityT | None:
        """Shallow-merge ``fields`` into the entity. Missing ids are ignored."""

        index = self._index_of(entity_id)
        if index is None:
            return None
        updated = self._items[index].model_copy(update=fields)
        self._items[index] = updated
        return updated

    def get(self, entity_id: str) -> EntityT | None:
        index = self._index_of(entity_id)
        return None if index is None else self._items[index]

    def items(self) -> list[EntityT]:
        return list(self._items)

    def ids(self) -> list[str]:
        return [item.id for item in self._items]

    def clear(self) -> None:
        self._items = []
        self.locks.clear()

    def _index_of(self, entity_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    def __contains__(self, entity_id: object) -> bool:
        return isinstance(entity_id, str) and self._index_of(entity_id) is not None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))


__all__ = ["EntityCache", "MutationLocks"]
