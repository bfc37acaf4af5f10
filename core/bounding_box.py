"""
Bounding Box Computation - Axis-aligned boxes for coarse culling.

Boxes are only ever used to skip exact tests early. Containment and
collision answers always come from SAT or Shapely, never from a box.
"""

import numpy as np
from numba import njit, prange
from dataclasses import dataclass
from typing import Tuple


# =============================================================================
# NUMBA KERNELS
# =============================================================================

@njit(cache=True, fastmath=True)
def get_bounds(vertices: np.ndarray) -> Tuple[float, float, float, float]:
    """
    Get axis-aligned bounding box for vertices.

    Returns:
        (min_x, min_y, max_x, max_y)
    """
    min_x = vertices[0, 0]
    max_x = vertices[0, 0]
    min_y = vertices[0, 1]
    max_y = vertices[0, 1]

    for i in range(1, len(vertices)):
        x = vertices[i, 0]
        y = vertices[i, 1]

        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x

        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y

    return min_x, min_y, max_x, max_y


@njit(cache=True, fastmath=True, parallel=True)
def get_all_bounds(all_vertices: np.ndarray) -> np.ndarray:
    """
    Get bounding boxes for a stack of equally sized polygons.

    Args:
        all_vertices: (n, k, 2) array

    Returns:
        (n, 4) array of (min_x, min_y, max_x, max_y)
    """
    n = len(all_vertices)
    bounds = np.empty((n, 4), dtype=np.float64)

    for i in prange(n):
        min_x, min_y, max_x, max_y = get_bounds(all_vertices[i])
        bounds[i, 0] = min_x
        bounds[i, 1] = min_y
        bounds[i, 2] = max_x
        bounds[i, 3] = max_y

    return bounds


@njit(cache=True, fastmath=True)
def bounds_overlap(
    b1_min_x: float, b1_min_y: float, b1_max_x: float, b1_max_y: float,
    b2_min_x: float, b2_min_y: float, b2_max_x: float, b2_max_y: float
) -> bool:
    """
    Check if two AABBs overlap (touching counts as overlapping).

    Returns True if overlapping, False if separated.
    """
    return not (
        b1_max_x < b2_min_x or b2_max_x < b1_min_x or
        b1_max_y < b2_min_y or b2_max_y < b1_min_y
    )


# =============================================================================
# BOUNDING BOX VALUE
# =============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box {min_x, max_x, min_y, max_y}."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def of_vertices(cls, vertices: np.ndarray) -> 'BoundingBox':
        min_x, min_y, max_x, max_y = get_bounds(vertices)
        return cls(float(min_x), float(max_x), float(min_y), float(max_y))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def expanded(self, margin: float) -> 'BoundingBox':
        """Grow the box by margin on every side."""
        return BoundingBox(
            self.min_x - margin, self.max_x + margin,
            self.min_y - margin, self.max_y + margin,
        )

    def overlaps(self, other: 'BoundingBox', margin: float = 0.0) -> bool:
        """True if the boxes overlap once this one is grown by margin."""
        return bounds_overlap(
            self.min_x - margin, self.min_y - margin,
            self.max_x + margin, self.max_y + margin,
            other.min_x, other.min_y, other.max_x, other.max_y,
        )

    def contains_point(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def to_tuple(self) -> Tuple[float, float, float, float]:
        """Return (min_x, min_y, max_x, max_y)."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)


# =============================================================================
# WARMUP
# =============================================================================

def warmup():
    """Warm up JIT compilation."""
    verts = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [1.0, 1.0],
        [0.0, 1.0]
    ], dtype=np.float64)

    _ = get_bounds(verts)
    _ = get_all_bounds(np.stack([verts, verts]))
    _ = bounds_overlap(0.0, 0.0, 1.0, 1.0, 0.5, 0.5, 1.5, 1.5)

    print("JIT warmup complete for bounding_box module")
