"""
Lattice Tiling - Fill a facet with panels by dragging out an oriented grid.

The seed panel fixes the lattice: its rotated width and height vectors are
the two step vectors, and its center is lattice index (0, 0). The drag
extent, projected onto the step vectors, says how many steps the user has
dragged across in each direction (negative when dragging backwards).

Every index pair in the dragged range is a candidate cell. Cells are
accepted in enumeration order (i ascending, then j ascending) when they
satisfy the facet containment policy and do not overlap an existing panel
or a cell accepted earlier in the same pass.

Containment policies:
1. 'inside'  - the cell lies fully within the facet (default)
2. 'overlap' - the cell interior merely intersects the facet

Nothing is kept between calls; each drag frame re-tiles from scratch.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple
import math
import time

from config import CONFIG, GeometryConfig, LatticeConfig
from core.collision import FacetRegion, polygons_overlap
from core.polygon import OrientedRect, Polygon, as_polygon
from core.vector import Vector2, VectorLike, as_vector


# =============================================================================
# RESULT
# =============================================================================

@dataclass
class LatticeResult:
    """
    Ordered accepted cells of one tiling pass.

    Behaves like a read-only list of Polygons; indices and facet_indices
    run parallel to cells.
    """
    cells: List[Polygon] = field(default_factory=list)
    indices: List[Tuple[int, int]] = field(default_factory=list)
    facet_indices: List[int] = field(default_factory=list)
    n_candidates: int = 0
    n_outside: int = 0
    n_overlapping: int = 0

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(self.cells)

    def __getitem__(self, idx) -> Polygon:
        return self.cells[idx]

    def __bool__(self) -> bool:
        return bool(self.cells)

    def to_flat(self) -> List[List[float]]:
        """Cells as flat point lists for the canvas layer."""
        return [cell.to_flat() for cell in self.cells]


# =============================================================================
# LATTICE BASIS
# =============================================================================

def step_vectors(seed: OrientedRect) -> Tuple[Vector2, Vector2]:
    """Oriented lattice basis: (width, 0) and (0, height) rotated by the seed."""
    step_x = Vector2(seed.width, 0.0).rotate(seed.rotation)
    step_y = Vector2(0.0, seed.height).rotate(seed.rotation)
    return step_x, step_y


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def step_counts(
    seed: OrientedRect,
    drag_extent: VectorLike,
    rounding: str = 'round',
    tolerance: float = 1e-12,
) -> Optional[Tuple[int, int]]:
    """
    Signed step counts spanned by a drag.

    Returns:
        (count_x, count_y), or None when the seed has no extent or the drag
        has no component along one of the lattice axes
    """
    if seed.width <= 0.0 or seed.height <= 0.0:
        return None

    drag = as_vector(drag_extent)
    step_x, step_y = step_vectors(seed)

    norm_x = step_x.dot(step_x)
    norm_y = step_y.dot(step_y)
    if norm_x <= tolerance or norm_y <= tolerance:
        return None

    proj_x = drag.dot(step_x) / norm_x
    proj_y = drag.dot(step_y) / norm_y
    if abs(proj_x) <= tolerance or abs(proj_y) <= tolerance:
        return None

    if rounding == 'round':
        return _round_half_away(proj_x), _round_half_away(proj_y)
    if rounding == 'trunc':
        return int(proj_x), int(proj_y)
    raise ValueError(f"Unknown count rounding: {rounding!r}")


def index_range(count: int) -> range:
    """Indices from 0 to count inclusive, whichever the sign."""
    return range(min(0, count), max(0, count) + 1)


def cell_at(seed: OrientedRect, i: int, j: int) -> OrientedRect:
    """Seed translated to lattice index (i, j)."""
    step_x, step_y = step_vectors(seed)
    center = seed.center + step_x * i + step_y * j
    return OrientedRect(center, seed.width, seed.height, seed.rotation)


def selection_rect(seed: OrientedRect, drag_extent: VectorLike, rounding: str = 'round') -> Optional[OrientedRect]:
    """
    Rubber-band rectangle covering the dragged index range.

    Rotated with the lattice, so the caller can draw the selection box the
    user is pulling out. None when the drag spans no lattice.
    """
    counts = step_counts(seed, drag_extent, rounding)
    if counts is None:
        return None

    count_x, count_y = counts
    step_x, step_y = step_vectors(seed)
    mid = seed.center + step_x * (count_x / 2.0) + step_y * (count_y / 2.0)
    return OrientedRect(
        mid,
        seed.width * (abs(count_x) + 1),
        seed.height * (abs(count_y) + 1),
        seed.rotation,
    )


# =============================================================================
# LATTICE TILER
# =============================================================================

class LatticeTiler:
    """
    Tile facets with copies of a seed panel.

    Example:
        tiler = LatticeTiler()
        result = tiler.generate(seed, facet, drag_extent=(180, 180))
        for cell in result:
            draw(cell.to_flat())
    """

    def __init__(self, config: LatticeConfig = None, geometry: GeometryConfig = None):
        self.config = config or CONFIG.lattice
        self.geometry = geometry or CONFIG.geometry

        if self.config.containment not in ('inside', 'overlap'):
            raise ValueError(f"Unknown containment policy: {self.config.containment!r}")

    def generate(
        self,
        seed: OrientedRect,
        boundaries: Sequence,
        drag_extent: VectorLike,
        existing: Sequence = (),
        verbose: bool = None,
    ) -> LatticeResult:
        """
        Enumerate and filter lattice cells.

        Args:
            seed: Panel at lattice index (0, 0)
            boundaries: One or more facet polygons; a cell belongs to the
                first facet that accepts it
            drag_extent: Drag vector from the seed center
            existing: Already placed panels (Polygons or OrientedRects)
            verbose: Override config verbosity

        Returns:
            LatticeResult (empty on degenerate seed or drag)
        """
        cfg = self.config
        if verbose is None:
            verbose = cfg.verbose

        start_time = time.time()
        result = LatticeResult()

        counts = step_counts(seed, drag_extent, cfg.count_rounding, self.geometry.edge_epsilon)
        if counts is None:
            if verbose:
                print("  Lattice: degenerate seed or drag, nothing to tile")
            return result

        regions = [FacetRegion(b, self.geometry) for b in boundaries]
        placed = [as_polygon(p) for p in existing]
        placed = [p for p in placed if not p.is_degenerate(self.geometry.edge_epsilon)]

        count_x, count_y = counts

        for i in index_range(count_x):
            for j in index_range(count_y):
                result.n_candidates += 1

                cell = cell_at(seed, i, j).to_polygon()

                facet_idx = self._owning_facet(cell, regions)
                if facet_idx is None:
                    result.n_outside += 1
                    continue

                if self._overlaps_any(cell, placed):
                    result.n_overlapping += 1
                    continue

                result.cells.append(cell)
                result.indices.append((i, j))
                result.facet_indices.append(facet_idx)
                placed.append(cell)

        if verbose:
            elapsed = time.time() - start_time
            print(f"  Lattice {count_x:+d} x {count_y:+d} steps "
                  f"({cfg.containment}): {result.n_candidates} candidates")
            print(f"    Accepted: {len(result)}")
            print(f"    Outside facet: {result.n_outside}")
            print(f"    Overlapping: {result.n_overlapping}")
            print(f"    Time: {elapsed * 1000:.1f}ms")

        return result

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _owning_facet(self, cell: Polygon, regions: List[FacetRegion]) -> Optional[int]:
        for idx, region in enumerate(regions):
            if region.accepts(cell, self.config.containment):
                return idx
        return None

    def _overlaps_any(self, cell: Polygon, placed: List[Polygon]) -> bool:
        return any(polygons_overlap(cell, other, self.geometry) for other in placed)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def generate_lattice(
    seed: OrientedRect,
    boundary,
    drag_extent: VectorLike,
    existing: Sequence = (),
    config: LatticeConfig = None,
) -> LatticeResult:
    """
    Cells of the dragged lattice that fit the facet without overlaps.

    Args:
        seed: Seed cell (width, height, rotation, center at index (0, 0))
        boundary: Facet polygon
        drag_extent: (dx, dy) drag vector
        existing: Previously placed panels

    Returns:
        LatticeResult of accepted cell polygons, in enumeration order
    """
    return LatticeTiler(config).generate(seed, [boundary], drag_extent, existing)


def tile_facets(
    seed: OrientedRect,
    facets: Sequence,
    drag_extent: VectorLike,
    existing: Sequence = (),
    config: LatticeConfig = None,
) -> LatticeResult:
    """Tile across several facets at once; see LatticeResult.facet_indices."""
    return LatticeTiler(config).generate(seed, facets, drag_extent, existing)


def seed_accepted(seed: OrientedRect, boundary, config: GeometryConfig = None) -> bool:
    """
    Whether a drag may start from this seed.

    The seed must at least overlap the facet; a press outside every facet
    starts no lattice.
    """
    if seed.is_degenerate:
        return False
    return FacetRegion(boundary, config).overlaps(seed.to_polygon())

