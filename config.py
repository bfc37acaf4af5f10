"""
Facet Layout - Global Configuration
All tolerances, snapping and tiling settings in one place.
"""

from dataclasses import dataclass, field


@dataclass
class GeometryConfig:
    """Numeric tolerances shared by the geometry core."""
    # Penetration at or below this counts as touching, not colliding
    tolerance: float = 1e-9

    # Edge normals shorter than this are skipped as separating axes
    edge_epsilon: float = 1e-12

    # Slack added to facets before exact Shapely containment tests
    containment_tolerance: float = 1e-7

    # Raise PreconditionError on non-convex SAT inputs
    validate_convexity: bool = False


@dataclass
class SnapConfig:
    """Snap resolver configuration."""
    # Snap distance in canvas units
    threshold: float = 15.0

    # True: collision-first. False: a static offering a snap is not pushed out
    collision_priority: bool = True

    # Axis chosen when |dx| == |dy|
    tie_break: str = 'x'  # 'x', 'y'

    # 'axis' moves along one axis, 'corner' aligns the reference points fully
    snap_mode: str = 'axis'

    # Sequential collision sweeps before giving up on residual overlap
    max_collision_passes: int = 8

    # Drop a snap that would push the moving rect back into a static
    revalidate_snap: bool = True

    # Smaller |delta| wins even when it is zero, so an already aligned axis
    # blocks the snap. Off: aligned axes are skipped and the other one snaps
    aligned_axis_blocks: bool = False


@dataclass
class LatticeConfig:
    """Lattice tiler configuration."""
    # 'inside': cell fully covered by the facet. 'overlap': any interior overlap
    containment: str = 'inside'

    # 'round' (half away from zero) or 'trunc' for drag-to-count conversion
    count_rounding: str = 'round'

    verbose: bool = False


@dataclass
class LayoutConfig:
    """Master configuration combining all sub-configs."""
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    snap: SnapConfig = field(default_factory=SnapConfig)
    lattice: LatticeConfig = field(default_factory=LatticeConfig)


# Global configuration instance
CONFIG = LayoutConfig()


def get_geometry_config(config: GeometryConfig = None) -> GeometryConfig:
    """Return the given geometry config or the global default."""
    return config if config is not None else CONFIG.geometry
