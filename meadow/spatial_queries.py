"""
Box query index over entities.

Answers "which entities lie inside this axis-aligned vision box" on the
horizontal plane. Two backends with the same results:
- scipy.cKDTree with the Chebyshev metric (p=inf)
- O(n) scan, kept for comparison and tiny populations

Results are always returned in the order refs were given at build time;
callers pass refs in ascending id order so the first hit is the lowest id.
"""

import numpy as np
from typing import Generic, List, Optional, Sequence, TypeVar

from scipy.spatial import cKDTree

from .constants import USE_CKDTREE, CKDTREE_LEAFSIZE
from .spatial import within_box

T = TypeVar('T')

# Widening applied to tree radius before the exact box re-check
_BOX_SLACK = 1e-9


def query_box_linear(
    center: np.ndarray,
    half_extent: float,
    refs: Sequence[T],
    positions: Sequence[np.ndarray]
) -> List[T]:
    """
    Entities inside the box, O(n) scan.

    Args:
        center: Box center [x, y, z]
        half_extent: Box half side on x and z
        refs: Entities (ascending id)
        positions: Matching positions [x, y, z]

    Returns:
        Matching refs in input order
    """
    return [ref for ref, pos in zip(refs, positions) if within_box(center, pos, half_extent)]


class BoxQueryIndex(Generic[T]):
    """
    Spatial index with a stable box-query API.

    Backend selection via constants.USE_CKDTREE (or the constructor
    override). Rebuild after positions or membership change.
    """

    def __init__(self, use_ckdtree: Optional[bool] = None, leafsize: Optional[int] = None):
        """
        Args:
            use_ckdtree: Override USE_CKDTREE constant (for testing)
            leafsize: Override CKDTREE_LEAFSIZE constant (for testing)
        """
        self._use_ckdtree = use_ckdtree if use_ckdtree is not None else USE_CKDTREE
        self._leafsize = leafsize if leafsize is not None else CKDTREE_LEAFSIZE
        self._refs: List[T] = []
        self._positions: np.ndarray = np.empty((0, 3), dtype=np.float64)
        self._tree: Optional[cKDTree] = None

        # Build sequence counter (incremented on every build)
        self.build_seq: int = 0

    @property
    def uses_ckdtree(self) -> bool:
        return self._use_ckdtree

    def build(self, refs: Sequence[T], positions: Optional[np.ndarray] = None):
        """
        Build the index.

        Args:
            refs: Entities in ascending id order (must expose .position
                  unless positions is given)
            positions: Optional (N, 3) array matching refs
        """
        self._refs = list(refs)
        if positions is None:
            if self._refs:
                positions = np.array([r.position for r in self._refs], dtype=np.float64)
            else:
                positions = np.empty((0, 3), dtype=np.float64)
        elif len(positions) != len(self._refs):
            raise ValueError("positions and refs must have the same length")

        self._positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        self.build_seq += 1

        if self._use_ckdtree and len(self._refs) > 0:
            # Index the horizontal plane only
            self._tree = cKDTree(self._positions[:, [0, 2]], leafsize=self._leafsize)
        else:
            self._tree = None

    def query_box(self, center: np.ndarray, half_extent: float) -> List[T]:
        """
        Entities whose |dx| <= half_extent and |dz| <= half_extent.

        Returns:
            Matching refs in build order (ascending id)
        """
        if not self._refs or half_extent < 0.0:
            return []

        if self._tree is None:
            return query_box_linear(center, half_extent, self._refs, self._positions)

        rows = self._tree.query_ball_point(
            [center[0], center[2]], half_extent + _BOX_SLACK, p=np.inf
        )
        rows = sorted(rows)
        # Exact re-check so both backends agree on the boundary
        return [self._refs[r] for r in rows
                if within_box(center, self._positions[r], half_extent)]

    def __len__(self) -> int:
        return len(self._refs)
