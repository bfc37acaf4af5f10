"""
Collision Detection - Separating Axis Theorem with minimum translation vector.

This module provides:
1. SAT (Separating Axis Theorem) - exact for convex panels, yields the MTV
2. AABB pre-check - cheap filter before SAT
3. Shapely region tests - containment of panels in arbitrary facets

SAT assumes convex inputs. Non-convex polygons give undefined results;
that is a documented precondition, checked only when
GeometryConfig.validate_convexity is set.
"""

import numpy as np
from numba import njit
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import math

from config import GeometryConfig, get_geometry_config
from .polygon import Polygon, as_polygon
from .vector import Vector2, ZERO


# =============================================================================
# SEPARATING AXIS THEOREM (SAT) KERNELS
# =============================================================================

@njit(cache=True, fastmath=True)
def project_polygon(vertices: np.ndarray, axis_x: float, axis_y: float) -> Tuple[float, float]:
    """
    Project polygon onto axis, return (min, max) projection.
    """
    min_proj = vertices[0, 0] * axis_x + vertices[0, 1] * axis_y
    max_proj = min_proj

    for i in range(1, len(vertices)):
        proj = vertices[i, 0] * axis_x + vertices[i, 1] * axis_y
        if proj < min_proj:
            min_proj = proj
        if proj > max_proj:
            max_proj = proj

    return min_proj, max_proj


@njit(cache=True, fastmath=True)
def _vertex_mean(vertices: np.ndarray) -> Tuple[float, float]:
    sx = 0.0
    sy = 0.0
    n = len(vertices)
    for i in range(n):
        sx += vertices[i, 0]
        sy += vertices[i, 1]
    return sx / n, sy / n


@njit(cache=True, fastmath=True)
def _scan_edge_axes(
    edges: np.ndarray,
    verts1: np.ndarray,
    verts2: np.ndarray,
    c1x: float, c1y: float, c2x: float, c2y: float,
    tolerance: float,
    edge_epsilon: float,
    n_axes: int,
    best_depth: float,
    best_x: float,
    best_y: float,
):
    """
    Test the edge normals of one polygon as separating axes.

    Returns:
        (separated, n_axes, best_depth, best_x, best_y) where (best_x, best_y)
        is the unit MTV direction pointing from polygon 1 towards polygon 2.
    """
    n = len(edges)

    for i in range(n):
        j = (i + 1) % n
        edge_x = edges[j, 0] - edges[i, 0]
        edge_y = edges[j, 1] - edges[i, 1]

        # Perpendicular (normal) - potential separating axis
        length = math.sqrt(edge_x * edge_x + edge_y * edge_y)
        if length <= edge_epsilon:
            continue
        axis_x = -edge_y / length
        axis_y = edge_x / length
        n_axes += 1

        min1, max1 = project_polygon(verts1, axis_x, axis_y)
        min2, max2 = project_polygon(verts2, axis_x, axis_y)

        # Interval overlap; touching intervals do not collide
        depth = min(max1, max2) - max(min1, min2)
        if depth <= tolerance:
            return True, n_axes, best_depth, best_x, best_y

        # Distance polygon 1 must travel along -axis / +axis to clear polygon 2
        push_back = max1 - min2
        push_fwd = max2 - min1

        if abs(push_back - push_fwd) <= tolerance:
            amount = push_back
            proj1 = c1x * axis_x + c1y * axis_y
            proj2 = c2x * axis_x + c2y * axis_y
            sign = -1.0 if proj1 > proj2 else 1.0
        elif push_back < push_fwd:
            amount = push_back
            sign = 1.0
        else:
            amount = push_fwd
            sign = -1.0

        if best_depth < 0.0 or amount < best_depth:
            best_depth = amount
            best_x = sign * axis_x
            best_y = sign * axis_y

    return False, n_axes, best_depth, best_x, best_y


@njit(cache=True, fastmath=True)
def sat_collision(
    verts1: np.ndarray,
    verts2: np.ndarray,
    tolerance: float,
    edge_epsilon: float,
) -> Tuple[bool, float, float, float]:
    """
    SAT test between two convex polygons.

    Returns:
        (collided, dir_x, dir_y, depth). Translating polygon 1 by
        -(dir * depth) separates the pair.
    """
    c1x, c1y = _vertex_mean(verts1)
    c2x, c2y = _vertex_mean(verts2)

    # Check all edges from polygon 1
    separated, n_axes, best, bx, by = _scan_edge_axes(
        verts1, verts1, verts2, c1x, c1y, c2x, c2y,
        tolerance, edge_epsilon, 0, -1.0, 0.0, 0.0
    )
    if separated:
        return False, 0.0, 0.0, 0.0

    # Check all edges from polygon 2
    separated, n_axes, best, bx, by = _scan_edge_axes(
        verts2, verts1, verts2, c1x, c1y, c2x, c2y,
        tolerance, edge_epsilon, n_axes, best, bx, by
    )
    if separated or n_axes == 0:
        return False, 0.0, 0.0, 0.0

    return True, bx, by, best


@njit(cache=True, fastmath=True)
def sat_overlap(verts1: np.ndarray, verts2: np.ndarray, tolerance: float) -> bool:
    """Boolean-only SAT (no MTV bookkeeping needed by callers)."""
    collided, _, _, _ = sat_collision(verts1, verts2, tolerance, 1e-12)
    return collided


# =============================================================================
# COLLISION RESULT
# =============================================================================

@dataclass(frozen=True)
class CollisionResult:
    """
    Outcome of a SAT test.

    When collided, overlap is the MTV: translating the first polygon by
    -overlap makes the pair non-overlapping.
    """
    collided: bool
    overlap: Vector2 = ZERO

    @property
    def depth(self) -> float:
        return self.overlap.magnitude()

    def __bool__(self) -> bool:
        return self.collided


NO_COLLISION = CollisionResult(False, ZERO)


def test_collision(a, b, config: GeometryConfig = None) -> CollisionResult:
    """
    SAT collision between two convex shapes.

    Args:
        a: Moving shape (Polygon, OrientedRect or vertex sequence)
        b: Other shape
        config: Geometry tolerances (defaults to CONFIG.geometry)

    Returns:
        CollisionResult. Degenerate shapes (fewer than 3 vertices, zero
        area, or no usable edge normal) never collide.
    """
    cfg = get_geometry_config(config)
    poly_a = as_polygon(a)
    poly_b = as_polygon(b)

    if cfg.validate_convexity:
        poly_a.validate()
        poly_b.validate()

    if poly_a.is_degenerate(cfg.edge_epsilon) or poly_b.is_degenerate(cfg.edge_epsilon):
        return NO_COLLISION

    collided, dir_x, dir_y, depth = sat_collision(
        poly_a.vertices, poly_b.vertices, cfg.tolerance, cfg.edge_epsilon
    )
    if not collided:
        return NO_COLLISION

    return CollisionResult(True, Vector2(float(dir_x * depth), float(dir_y * depth)))


# Not a pytest test function, despite the name
test_collision.__test__ = False


# =============================================================================
# MAIN COLLISION CHECKING FUNCTIONS
# =============================================================================

def polygons_overlap(a, b, config: GeometryConfig = None) -> bool:
    """
    Check if two convex polygons overlap.

    Uses AABB pre-check for speed, then SAT.
    """
    cfg = get_geometry_config(config)
    poly_a = as_polygon(a)
    poly_b = as_polygon(b)

    if poly_a.is_degenerate(cfg.edge_epsilon) or poly_b.is_degenerate(cfg.edge_epsilon):
        return False
    if not poly_a.bounds().overlaps(poly_b.bounds()):
        return False

    return test_collision(poly_a, poly_b, cfg).collided


def collides_with_any(shape, others: Sequence, config: GeometryConfig = None) -> bool:
    """True if shape overlaps any polygon in others."""
    poly = as_polygon(shape)
    return any(polygons_overlap(poly, other, config) for other in others)


def find_collisions(polygons: Sequence, config: GeometryConfig = None) -> List[Tuple[int, int]]:
    """
    Find ALL colliding pairs.

    Returns:
        List of (i, j) tuples with i < j
    """
    polys = [as_polygon(p) for p in polygons]
    n = len(polys)
    collisions = []

    for i in range(n):
        for j in range(i + 1, n):
            if polygons_overlap(polys[i], polys[j], config):
                collisions.append((i, j))

    return collisions


# =============================================================================
# SHAPELY-BASED REGION TESTS (facets may be non-convex)
# =============================================================================

class FacetRegion:
    """
    Exact region predicates against one facet (boundary hull).

    Builds the Shapely geometry once so a tiling pass can test many
    cells against the same facet.
    """

    def __init__(self, boundary, config: GeometryConfig = None):
        from shapely.prepared import prep
        from shapely.validation import make_valid

        cfg = get_geometry_config(config)
        self.polygon = as_polygon(boundary)
        self.degenerate = self.polygon.is_degenerate(cfg.edge_epsilon)

        shape = self.polygon.to_shapely() if len(self.polygon) >= 3 else None
        if shape is not None and not shape.is_valid:
            shape = make_valid(shape)

        self._shape = shape
        self._bounds = self.polygon.bounds() if len(self.polygon) else None
        if self.degenerate:
            self._covering = None
            self._touching = None
        else:
            self._covering = prep(shape.buffer(cfg.containment_tolerance))
            self._touching = prep(shape)
        self._tolerance = cfg.containment_tolerance

    def contains(self, cell) -> bool:
        """Cell lies fully inside the facet (boundary contact allowed)."""
        if self.degenerate:
            return False
        poly = as_polygon(cell)
        if not self._bounds.overlaps(poly.bounds(), self._tolerance):
            return False
        return self._covering.covers(poly.to_shapely())

    def overlaps(self, cell) -> bool:
        """Cell interior intersects the facet interior (touching does not count)."""
        if self.degenerate:
            return False
        poly = as_polygon(cell)
        if not self._bounds.overlaps(poly.bounds()):
            return False
        cell_shape = poly.to_shapely()
        return self._touching.intersects(cell_shape) and not self._shape.touches(cell_shape)

    def accepts(self, cell, policy: str = 'inside') -> bool:
        """Apply a containment policy: 'inside' or 'overlap'."""
        if policy == 'inside':
            return self.contains(cell)
        if policy == 'overlap':
            return self.overlaps(cell)
        raise ValueError(f"Unknown containment policy: {policy!r}")


def contains(boundary, cell, config: GeometryConfig = None) -> bool:
    """One-off containment test; build a FacetRegion for repeated use."""
    return FacetRegion(boundary, config).contains(cell)


def overlaps_region(boundary, cell, config: GeometryConfig = None) -> bool:
    """One-off interior-overlap test against a facet."""
    return FacetRegion(boundary, config).overlaps(cell)


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

    _ = project_polygon(verts, 1.0, 0.0)
    _ = sat_collision(verts, verts, 1e-9, 1e-12)
    _ = sat_overlap(verts, verts, 1e-9)

    print("JIT warmup complete for collision module")
