"""
Polygon Model - Oriented rectangles and convex polygons with Numba kernels.

Panels are OrientedRects: a center, a width/height and a rotation in
radians. Their corners come out in a fixed winding order:

    0: top-left, 1: top-right, 2: bottom-right, 3: bottom-left

of the unrotated rectangle (y-down canvas naming), rotated about the
center. Rotation never reflects, so the order survives any angle.

Facets (boundary hulls) and already placed panels arrive as plain vertex
lists and are wrapped in Polygon. Polygons are implicitly closed.
"""

import numpy as np
from numba import njit
from dataclasses import dataclass
from typing import Iterator, List, Sequence
import math

from .bounding_box import BoundingBox
from .vector import Vector2, VectorLike, as_vector


# Unit offsets of the four corners from the rect center, in winding order
LOCAL_CORNERS = np.array([
    [-0.5, -0.5],   # top-left
    [0.5, -0.5],    # top-right
    [0.5, 0.5],     # bottom-right
    [-0.5, 0.5],    # bottom-left
], dtype=np.float64)


class PreconditionError(ValueError):
    """Raised by the optional convexity check on SAT inputs."""


# =============================================================================
# NUMBA-ACCELERATED TRANSFORMATIONS
# =============================================================================

@njit(cache=True, fastmath=True)
def rotate_vertices(vertices: np.ndarray, angle_rad: float) -> np.ndarray:
    """
    Rotate vertices around origin by angle (in radians).

    Args:
        vertices: (N, 2) array of vertex coordinates
        angle_rad: Rotation angle in radians

    Returns:
        Rotated vertices array (N, 2)
    """
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)

    n = len(vertices)
    rotated = np.empty((n, 2), dtype=np.float64)

    for i in range(n):
        x = vertices[i, 0]
        y = vertices[i, 1]
        rotated[i, 0] = x * cos_a - y * sin_a
        rotated[i, 1] = x * sin_a + y * cos_a

    return rotated


@njit(cache=True, fastmath=True)
def translate_vertices(vertices: np.ndarray, dx: float, dy: float) -> np.ndarray:
    """
    Translate vertices by (dx, dy).

    Returns:
        Translated vertices array (N, 2)
    """
    n = len(vertices)
    translated = np.empty((n, 2), dtype=np.float64)

    for i in range(n):
        translated[i, 0] = vertices[i, 0] + dx
        translated[i, 1] = vertices[i, 1] + dy

    return translated


@njit(cache=True, fastmath=True)
def rect_corners(
    cx: float, cy: float, width: float, height: float, angle_rad: float
) -> np.ndarray:
    """
    Corners of an oriented rectangle.

    Scales the unit corner offsets to half-width/half-height, rotates
    them by the rect rotation and translates them to the center.

    Returns:
        (4, 2) array in top-left, top-right, bottom-right, bottom-left order
    """
    local = np.empty((4, 2), dtype=np.float64)
    for i in range(4):
        local[i, 0] = LOCAL_CORNERS[i, 0] * width
        local[i, 1] = LOCAL_CORNERS[i, 1] * height

    rotated = rotate_vertices(local, angle_rad)
    return translate_vertices(rotated, cx, cy)


@njit(cache=True)
def polygon_area(vertices: np.ndarray) -> float:
    """Signed area via shoelace formula (positive = counter-clockwise, y-up)."""
    n = len(vertices)
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i, 0] * vertices[j, 1]
        area -= vertices[j, 0] * vertices[i, 1]
    return area / 2.0


# =============================================================================
# PRECONDITIONS
# =============================================================================

def is_convex(vertices: np.ndarray, tolerance: float = 1e-9) -> bool:
    """
    Check that a closed vertex loop turns consistently in one direction.

    Collinear vertices are tolerated; a loop with no turn at all (every
    vertex on one line) is not convex.
    """
    n = len(vertices)
    if n < 3:
        return False

    sign = 0
    for i in range(n):
        x0, y0 = vertices[i]
        x1, y1 = vertices[(i + 1) % n]
        x2, y2 = vertices[(i + 2) % n]
        turn = (x1 - x0) * (y2 - y1) - (y1 - y0) * (x2 - x1)
        if abs(turn) <= tolerance:
            continue
        current = 1 if turn > 0 else -1
        if sign == 0:
            sign = current
        elif current != sign:
            return False

    return sign != 0


# =============================================================================
# POLYGON
# =============================================================================

class Polygon:
    """
    Ordered, implicitly closed vertex loop.

    Must not self-intersect; SAT additionally assumes convexity. Neither
    is checked at construction, see validate().

    Attributes:
        vertices: (N, 2) float64 array
    """

    __slots__ = ['_vertices', '_bounds']

    def __init__(self, vertices):
        if len(vertices) and isinstance(vertices[0], (Vector2, dict)):
            vertices = [as_vector(v).to_tuple() for v in vertices]

        arr = np.asarray(vertices, dtype=np.float64)
        if arr.size == 0:
            arr = arr.reshape(0, 2)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise ValueError(f"Polygon vertices must be shaped (N, 2), got {arr.shape}")

        self._vertices = np.ascontiguousarray(arr)
        self._bounds = None

    @classmethod
    def from_rect(cls, rect: 'OrientedRect') -> 'Polygon':
        return cls(rect.corners())

    @classmethod
    def from_flat(cls, points: Sequence[float]) -> 'Polygon':
        """Build from a canvas-style flat list [x0, y0, x1, y1, ...]."""
        if len(points) % 2:
            raise ValueError("Flat point list must have an even length")
        return cls(np.asarray(points, dtype=np.float64).reshape(-1, 2))

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vector2]:
        for x, y in self._vertices:
            yield Vector2(float(x), float(y))

    def points(self) -> List[Vector2]:
        return list(self)

    def to_flat(self) -> List[float]:
        """Flat [x0, y0, x1, y1, ...] list for the canvas layer."""
        return [float(c) for c in self._vertices.ravel()]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def bounds(self) -> BoundingBox:
        """Axis-aligned bounding box. Cached."""
        if self._bounds is None:
            self._bounds = BoundingBox.of_vertices(self._vertices)
        return self._bounds

    def centroid(self) -> Vector2:
        """Arithmetic mean of the vertices (exact for rectangles)."""
        if len(self._vertices) == 0:
            return Vector2(0.0, 0.0)
        mean = self._vertices.mean(axis=0)
        return Vector2(float(mean[0]), float(mean[1]))

    def area(self) -> float:
        """Signed shoelace area."""
        if len(self._vertices) < 3:
            return 0.0
        return float(polygon_area(self._vertices))

    def is_degenerate(self, tolerance: float = 1e-12) -> bool:
        """Fewer than 3 vertices or no enclosed area."""
        return len(self._vertices) < 3 or abs(self.area()) <= tolerance

    def is_convex(self) -> bool:
        return is_convex(self._vertices)

    def validate(self):
        """
        Raise PreconditionError unless this is a convex polygon.

        Optional pass; the collision engine does not call it unless
        GeometryConfig.validate_convexity is set.
        """
        if len(self._vertices) < 3:
            raise PreconditionError(f"Polygon needs at least 3 vertices, got {len(self._vertices)}")
        if not self.is_convex():
            raise PreconditionError("Polygon is not convex; SAT results would be undefined")

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def translated(self, delta: VectorLike) -> 'Polygon':
        d = as_vector(delta)
        return Polygon(translate_vertices(self._vertices, d.x, d.y))

    def rotated(self, angle_rad: float, pivot: VectorLike = None) -> 'Polygon':
        """Rotate about pivot (default: centroid)."""
        p = self.centroid() if pivot is None else as_vector(pivot)
        moved = translate_vertices(self._vertices, -p.x, -p.y)
        return Polygon(translate_vertices(rotate_vertices(moved, angle_rad), p.x, p.y))

    def to_shapely(self):
        """Shapely polygon for exact region predicates."""
        from shapely.geometry import Polygon as ShapelyPolygon
        return ShapelyPolygon(self._vertices)

    def __repr__(self) -> str:
        return f"Polygon(n={len(self._vertices)}, bounds={self.bounds().to_tuple() if len(self) else None})"


# =============================================================================
# ORIENTED RECTANGLE
# =============================================================================

@dataclass(frozen=True)
class OrientedRect:
    """
    Rectangle rotated about its center.

    Attributes:
        center: Rect center
        width: Extent along the local x axis (>= 0)
        height: Extent along the local y axis (>= 0)
        rotation: Rotation in radians
    """
    center: Vector2
    width: float
    height: float
    rotation: float = 0.0

    def __post_init__(self):
        if not isinstance(self.center, Vector2):
            object.__setattr__(self, 'center', as_vector(self.center))

    @classmethod
    def from_degrees(
        cls, x: float, y: float, width: float, height: float, rotation_deg: float = 0.0
    ) -> 'OrientedRect':
        """Build from the caller's {position, width, height, rotationDegrees} record."""
        return cls(Vector2(float(x), float(y)), float(width), float(height), math.radians(rotation_deg))

    @property
    def rotation_deg(self) -> float:
        return math.degrees(self.rotation)

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0.0 or self.height <= 0.0

    def corners(self) -> np.ndarray:
        """(4, 2) corner array, see module docstring for order."""
        return rect_corners(self.center.x, self.center.y, self.width, self.height, self.rotation)

    def to_polygon(self) -> Polygon:
        return Polygon(self.corners())

    def moved_to(self, point: VectorLike) -> 'OrientedRect':
        return OrientedRect(as_vector(point), self.width, self.height, self.rotation)

    def translated(self, delta: VectorLike) -> 'OrientedRect':
        return OrientedRect(self.center + as_vector(delta), self.width, self.height, self.rotation)

    def rotated_by(self, angle_rad: float) -> 'OrientedRect':
        return OrientedRect(self.center, self.width, self.height, self.rotation + angle_rad)

    def __repr__(self) -> str:
        return (f"OrientedRect(x={self.center.x:.4f}, y={self.center.y:.4f}, "
                f"w={self.width:.4f}, h={self.height:.4f}, angle={self.rotation_deg:.2f}°)")


# =============================================================================
# MODULE-LEVEL HELPERS
# =============================================================================

def corners_of(rect: OrientedRect) -> np.ndarray:
    """Four corners of rect in fixed winding order."""
    return rect.corners()


def bounding_box_of(polygon: Polygon) -> BoundingBox:
    """Coarse culling box; never use for exact containment."""
    return polygon.bounds()


def centroid_of(polygon: Polygon) -> Vector2:
    """Vertex mean. Callers needing an area-weighted centroid compute their own."""
    return polygon.centroid()


def as_polygon(shape) -> Polygon:
    """Accept a Polygon, an OrientedRect or a raw vertex sequence."""
    if isinstance(shape, Polygon):
        return shape
    if isinstance(shape, OrientedRect):
        return shape.to_polygon()
    return Polygon(shape)


# =============================================================================
# WARM-UP JIT COMPILATION
# =============================================================================

def warmup():
    """Warm up JIT compilation by calling all functions once."""
    _ = rotate_vertices(LOCAL_CORNERS, 0.5)
    _ = translate_vertices(LOCAL_CORNERS, 1.0, 1.0)
    _ = rect_corners(0.0, 0.0, 1.0, 1.0, 0.0)
    _ = polygon_area(LOCAL_CORNERS)

    print("JIT warmup complete for polygon module")
