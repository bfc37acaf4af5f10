"""
Snap Resolver - Collision avoidance and proximity snapping for a dragged panel.

Called once per pointer-move frame with an explicit snapshot of the static
panels. Nothing is cached between calls: the same inputs always give the
same answer.

Precedence:
1. Collision avoidance. Every static the moving panel penetrates pushes it
   out by the SAT minimum translation vector, in input order. Each static
   is tested against the position already corrected by the statics before
   it, not against the raw pointer position, so the corrections are not a
   plain sum of the raw-position MTVs. Sweeps repeat until one finds no
   collision (bounded by max_collision_passes). There is no joint solve.
2. Proximity snap, only against statics that did not collide. The closest
   corner-to-corner or center-to-center pair within the threshold proposes
   a single-axis correction along the axis with the smaller delta. An axis
   that is already aligned is skipped unless aligned_axis_blocks is set, in
   which case it wins and the static offers no snap.
   Degenerate statics (zero width or height) neither collide nor snap.
3. The static whose center is nearest the pointer wins; ties go to input
   order. A snap that would push the panel back into a static is skipped in
   favour of the next candidate.

Only the position changes; rotation passes through.
"""

import numpy as np
from scipy.spatial.distance import cdist
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from config import CONFIG, GeometryConfig, SnapConfig
from core.collision import FacetRegion, polygons_overlap, test_collision
from core.polygon import OrientedRect, Polygon, as_polygon
from core.vector import Vector2, VectorLike, as_vector


# =============================================================================
# TYPES
# =============================================================================

class SnapAxis(Enum):
    X = 'x'
    Y = 'y'
    BOTH = 'both'  # corner snap mode


@dataclass(frozen=True)
class SnapCandidate:
    """One proposed correction toward a static shape."""
    axis: SnapAxis
    delta: float
    distance: float
    source_id: Any
    offset: Vector2 = field(default_factory=Vector2)
    pointer_distance: float = 0.0
    order: int = 0


@dataclass(frozen=True)
class Correction:
    """Displacement applied to push the moving panel out of one static."""
    source_id: Any
    offset: Vector2


@dataclass(frozen=True)
class MoveResolution:
    """Full outcome of one resolve call."""
    rect: OrientedRect
    raw: OrientedRect
    corrections: Tuple[Correction, ...] = ()
    candidates: Tuple[SnapCandidate, ...] = ()
    snap: Optional[SnapCandidate] = None
    on_facet: Optional[bool] = None

    @property
    def position(self) -> Vector2:
        return self.rect.center

    @property
    def collided(self) -> bool:
        return len(self.corrections) > 0

    @property
    def snapped(self) -> bool:
        return self.snap is not None


@dataclass(frozen=True)
class SceneSnapshot:
    """
    Read-only view of the scene for one frame.

    Attributes:
        moving: The dragged panel (its position is replaced by the pointer)
        statics: Panels or polygons the moving panel must respect
        threshold: Snap distance
        ids: Optional caller ids, parallel to statics (default: index)
        boundary: Optional facet polygon; compute_frame reports whether the
            resolved panel lies on it
    """
    moving: OrientedRect
    statics: Tuple = ()
    threshold: float = CONFIG.snap.threshold
    ids: Optional[Tuple] = None
    boundary: Optional[Polygon] = None


@dataclass(frozen=True)
class _StaticEntry:
    order: int
    source_id: Any
    polygon: Polygon
    center: Vector2
    corners: np.ndarray


def _entry(order: int, source_id, shape) -> _StaticEntry:
    if isinstance(shape, OrientedRect):
        polygon = shape.to_polygon()
        center = shape.center
    else:
        polygon = as_polygon(shape)
        center = polygon.centroid()
    return _StaticEntry(order, source_id, polygon, center, polygon.vertices)


# =============================================================================
# RESOLVER
# =============================================================================

class SnapResolver:
    """
    Resolve a dragged panel against a snapshot of static shapes.

    Example:
        resolver = SnapResolver(SnapConfig(threshold=15))
        result = resolver.resolve(moving, statics, pointer)
        canvas_node.position(result.position)
    """

    def __init__(self, config: SnapConfig = None, geometry: GeometryConfig = None):
        self.config = config or CONFIG.snap
        self.geometry = geometry or CONFIG.geometry

        if self.config.tie_break not in ('x', 'y'):
            raise ValueError(f"tie_break must be 'x' or 'y', got {self.config.tie_break!r}")
        if self.config.snap_mode not in ('axis', 'corner'):
            raise ValueError(f"snap_mode must be 'axis' or 'corner', got {self.config.snap_mode!r}")

    def resolve(
        self,
        moving: OrientedRect,
        statics: Sequence,
        pointer: VectorLike,
        threshold: float = None,
        ids: Sequence = None,
    ) -> MoveResolution:
        """
        Compute the corrected transform for the moving panel.

        Args:
            moving: Panel at its pointer-driven position
            statics: OrientedRects and/or convex Polygons
            pointer: Pointer position, used to rank snap targets
            threshold: Snap distance (defaults to config.threshold)
            ids: Optional ids reported back in corrections and candidates

        Returns:
            MoveResolution; rect equals moving when nothing applies
        """
        cfg = self.config
        if threshold is None:
            threshold = cfg.threshold
        pointer = as_vector(pointer)

        entries = [
            _entry(i, ids[i] if ids is not None else i, shape)
            for i, shape in enumerate(statics)
        ]
        # Zero-size statics neither collide nor snap
        entries = [e for e in entries if not e.polygon.is_degenerate(self.geometry.edge_epsilon)]

        # Distance-first variant: shapes offering a snap are exempt from push-out
        exempt = set()
        if not cfg.collision_priority:
            for e in entries:
                if self._proximity(moving, e, threshold, pointer) is not None:
                    exempt.add(e.order)

        current, corrections, collided = self._push_out(moving, entries, exempt)

        candidates = []
        for e in entries:
            if e.order in collided:
                continue
            candidate = self._proximity(current, e, threshold, pointer)
            if candidate is not None:
                candidates.append(candidate)

        ranked = sorted(candidates, key=lambda c: (c.pointer_distance, c.order))
        chosen = None
        for candidate in ranked:
            snapped = current.translated(candidate.offset)
            if self._snap_allowed(snapped, entries, exempt):
                current = snapped
                chosen = candidate
                break

        return MoveResolution(
            rect=current,
            raw=moving,
            corrections=tuple(corrections),
            candidates=tuple(ranked),
            snap=chosen,
        )

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _push_out(
        self, moving: OrientedRect, entries: List[_StaticEntry], exempt: set
    ) -> Tuple[OrientedRect, List[Correction], set]:
        """Sequential MTV corrections, repeated until a sweep is clean."""
        current = moving
        corrections = []
        collided = set()

        for _ in range(max(1, self.config.max_collision_passes)):
            moved = False

            for e in entries:
                if e.order in exempt:
                    continue

                polygon = current.to_polygon()
                if not polygon.bounds().overlaps(e.polygon.bounds()):
                    continue

                result = test_collision(polygon, e.polygon, self.geometry)
                if result.collided:
                    offset = -result.overlap
                    current = current.translated(offset)
                    corrections.append(Correction(e.source_id, offset))
                    collided.add(e.order)
                    moved = True

            if not moved:
                break

        return current, corrections, collided

    def _proximity(
        self,
        rect: OrientedRect,
        entry: _StaticEntry,
        threshold: float,
        pointer: Vector2,
    ) -> Optional[SnapCandidate]:
        """Snap proposal toward one static, or None when out of reach."""
        cfg = self.config
        eps = self.geometry.tolerance

        corners = rect.corners()
        if not entry.polygon.bounds().overlaps(as_polygon(corners).bounds(), threshold):
            return None

        # Closest corner-to-corner pair vs center-to-center
        pair_dist = cdist(corners, entry.corners)
        i, j = np.unravel_index(np.argmin(pair_dist), pair_dist.shape)
        distance = float(pair_dist[i, j])
        source = Vector2(float(entry.corners[j, 0]), float(entry.corners[j, 1]))
        target = Vector2(float(corners[i, 0]), float(corners[i, 1]))

        center_dist = rect.center.distance_to(entry.center)
        if center_dist < distance:
            distance = center_dist
            source = entry.center
            target = rect.center

        if distance > threshold or distance <= eps:
            return None

        dx = source.x - target.x
        dy = source.y - target.y
        pointer_distance = pointer.distance_to(entry.center)

        if cfg.snap_mode == 'corner':
            return SnapCandidate(
                axis=SnapAxis.BOTH,
                delta=distance,
                distance=distance,
                source_id=entry.source_id,
                offset=Vector2(dx, dy),
                pointer_distance=pointer_distance,
                order=entry.order,
            )

        # Single axis: smaller delta within threshold
        options = [
            (abs(dx), 0 if cfg.tie_break == 'x' else 1, SnapAxis.X, dx),
            (abs(dy), 0 if cfg.tie_break == 'y' else 1, SnapAxis.Y, dy),
        ]
        if not cfg.aligned_axis_blocks:
            options = [o for o in options if o[0] > eps]
        if not options:
            return None

        size, _, axis, delta = min(options, key=lambda o: (o[0], o[1]))
        if size <= eps or size > threshold:
            return None
        offset = Vector2(delta, 0.0) if axis is SnapAxis.X else Vector2(0.0, delta)

        return SnapCandidate(
            axis=axis,
            delta=delta,
            distance=distance,
            source_id=entry.source_id,
            offset=offset,
            pointer_distance=pointer_distance,
            order=entry.order,
        )

    def _snap_allowed(self, snapped: OrientedRect, entries: List[_StaticEntry], exempt: set) -> bool:
        if not (self.config.revalidate_snap and self.config.collision_priority):
            return True
        polygon = snapped.to_polygon()
        return not any(
            polygons_overlap(polygon, e.polygon, self.geometry)
            for e in entries
            if e.order not in exempt
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def resolve_move(
    moving: OrientedRect,
    statics: Sequence,
    pointer: VectorLike,
    threshold: float = None,
    config: SnapConfig = None,
) -> OrientedRect:
    """
    Corrected transform for a dragged panel.

    Returns moving unchanged when it neither collides nor comes within
    threshold of any static.
    """
    return SnapResolver(config).resolve(moving, statics, pointer, threshold).rect


def compute_frame(
    pointer: VectorLike,
    snapshot: SceneSnapshot,
    config: SnapConfig = None,
) -> MoveResolution:
    """
    One interaction frame: place the snapshot's panel at the pointer and resolve it.

    When the snapshot carries a facet, on_facet says whether the resolved
    panel lies inside it.
    """
    moving = snapshot.moving.moved_to(pointer)
    resolution = SnapResolver(config).resolve(
        moving, snapshot.statics, pointer, snapshot.threshold, ids=snapshot.ids
    )
    if snapshot.boundary is None:
        return resolution
    on_facet = FacetRegion(snapshot.boundary).contains(resolution.rect)
    return replace(resolution, on_facet=bool(on_facet))
