"""
Core module - Vector math, panel geometry, and collision detection.
"""

from .vector import (
    Vector2,
    as_vector,
)

from .polygon import (
    OrientedRect,
    Polygon,
    PreconditionError,
    corners_of,
    bounding_box_of,
    centroid_of,
    rotate_vertices,
    translate_vertices,
)

from .bounding_box import (
    BoundingBox,
    bounds_overlap,
    get_bounds,
)

from .collision import (
    CollisionResult,
    FacetRegion,
    test_collision,
    polygons_overlap,
    find_collisions,
)

__all__ = [
    'Vector2',
    'as_vector',
    'OrientedRect',
    'Polygon',
    'PreconditionError',
    'corners_of',
    'bounding_box_of',
    'centroid_of',
    'rotate_vertices',
    'translate_vertices',
    'BoundingBox',
    'bounds_overlap',
    'get_bounds',
    'CollisionResult',
    'FacetRegion',
    'test_collision',
    'polygons_overlap',
    'find_collisions',
]
