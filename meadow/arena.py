"""
Generational entity arena.

Entities live in dense slots addressed by EntityId(index, generation).
Removing an entity frees its slot and bumps the slot generation, so an id
held by a view layer never resolves to a different entity after reuse.
"""

from typing import Generic, Iterator, List, NamedTuple, Optional, Tuple, TypeVar

T = TypeVar('T')


class EntityId(NamedTuple):
    """Stable handle: slot index plus the slot generation at insert time"""
    index: int
    generation: int

    def __str__(self) -> str:
        return f"{self.index}v{self.generation}"


class EntityArena(Generic[T]):
    """
    Dense slot storage with O(1) lookup and generation-checked handles.

    Iteration is always in ascending slot index, which is the deterministic
    "lowest id first" order the simulation uses for tie-breaks.
    """

    def __init__(self):
        self._items: List[Optional[T]] = []
        self._generations: List[int] = []
        self._free: List[int] = []
        self._count: int = 0

    def insert(self, item: T) -> EntityId:
        """Store item in a free slot (or a new one) and return its id"""
        if self._free:
            # Reuse the lowest freed slot so iteration order stays compact
            self._free.sort()
            index = self._free.pop(0)
            self._items[index] = item
        else:
            index = len(self._items)
            self._items.append(item)
            self._generations.append(0)

        self._count += 1
        return EntityId(index, self._generations[index])

    def contains(self, entity_id: EntityId) -> bool:
        index, generation = entity_id
        return (0 <= index < len(self._items)
                and self._generations[index] == generation
                and self._items[index] is not None)

    def get(self, entity_id: EntityId) -> Optional[T]:
        """Return the item for entity_id, or None if absent or stale"""
        if not self.contains(entity_id):
            return None
        return self._items[entity_id.index]

    def replace(self, entity_id: EntityId, item: T) -> bool:
        """Overwrite the item stored under entity_id. No-op if stale."""
        if not self.contains(entity_id):
            return False
        self._items[entity_id.index] = item
        return True

    def remove(self, entity_id: EntityId) -> Optional[T]:
        """Free the slot for entity_id. No-op (returns None) if stale."""
        if not self.contains(entity_id):
            return None

        index = entity_id.index
        item = self._items[index]
        self._items[index] = None
        self._generations[index] += 1
        self._free.append(index)
        self._count -= 1
        return item

    def ids(self) -> List[EntityId]:
        return [EntityId(i, self._generations[i])
                for i, item in enumerate(self._items) if item is not None]

    def items(self) -> Iterator[Tuple[EntityId, T]]:
        for i, item in enumerate(self._items):
            if item is not None:
                yield EntityId(i, self._generations[i]), item

    def values(self) -> List[T]:
        return [item for item in self._items if item is not None]

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())
