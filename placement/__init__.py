"""
Placement module - Drag snapping and lattice tiling of panels.
"""

from .snap import (
    SnapAxis,
    SnapCandidate,
    SnapResolver,
    SceneSnapshot,
    MoveResolution,
    resolve_move,
    compute_frame,
)
from .lattice import (
    LatticeResult,
    LatticeTiler,
    generate_lattice,
    tile_facets,
    seed_accepted,
    selection_rect,
    step_vectors,
    step_counts,
)

__all__ = [
    'SnapAxis',
    'SnapCandidate',
    'SnapResolver',
    'SceneSnapshot',
    'MoveResolution',
    'resolve_move',
    'compute_frame',
    'LatticeResult',
    'LatticeTiler',
    'generate_lattice',
    'tile_facets',
    'seed_accepted',
    'selection_rect',
    'step_vectors',
    'step_counts',
]
