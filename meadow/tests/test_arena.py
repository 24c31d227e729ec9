"""
Test generational entity arena.

Verifies:
- Ids resolve while the entity lives
- Removed ids never resolve again, even after slot reuse
- Iteration order is ascending slot index
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from meadow.arena import EntityArena, EntityId


def test_insert_and_get():
    arena = EntityArena()
    a = arena.insert("a")
    b = arena.insert("b")

    assert a == EntityId(0, 0)
    assert b == EntityId(1, 0)
    assert arena.get(a) == "a"
    assert arena.get(b) == "b"
    assert len(arena) == 2


def test_stale_id_after_reuse():
    """A reused slot gets a new generation; the old id stays dead"""
    arena = EntityArena()
    a = arena.insert("a")
    arena.insert("b")

    assert arena.remove(a) == "a"
    assert arena.get(a) is None, "Removed id should not resolve"

    c = arena.insert("c")
    print(f"  old id={a}, reused id={c}")

    assert c.index == a.index, "Freed slot should be reused"
    assert c.generation == a.generation + 1
    assert arena.get(a) is None, "Stale id must not resolve to the new entity"
    assert arena.get(c) == "c"

    print("[OK] Stale ids never alias reused slots\n")


def test_unknown_ids_are_noops():
    arena = EntityArena()
    arena.insert("a")

    ghost = EntityId(7, 0)
    assert arena.get(ghost) is None
    assert arena.remove(ghost) is None
    assert arena.replace(ghost, "x") is False
    assert len(arena) == 1


def test_iteration_order_is_ascending():
    arena = EntityArena()
    ids = [arena.insert(name) for name in "abcd"]
    arena.remove(ids[1])
    arena.insert("e")  # fills slot 1

    assert arena.values() == ["a", "e", "c", "d"]
    assert [i.index for i in arena.ids()] == [0, 1, 2, 3]
    assert [item for _, item in arena.items()] == ["a", "e", "c", "d"]
