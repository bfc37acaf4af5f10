"""
Vector2 - Immutable 2D vector value type.

Rotation convention: a positive angle turns counter-clockwise in a y-up
frame, (x cos - y sin, x sin + y cos). On a y-down canvas the same angle
renders clockwise, which is what the canvas layer expects.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union
import math


@dataclass(frozen=True)
class Vector2:
    """2D vector. No identity; equal coordinates mean equal vectors."""
    x: float = 0.0
    y: float = 0.0

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x + other.x, self.y + other.y)

    def sub(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> 'Vector2':
        return Vector2(self.x * factor, self.y * factor)

    def __add__(self, other: 'Vector2') -> 'Vector2':
        return self.add(other)

    def __sub__(self, other: 'Vector2') -> 'Vector2':
        return self.sub(other)

    def __mul__(self, factor: float) -> 'Vector2':
        return self.scale(factor)

    __rmul__ = __mul__

    def __neg__(self) -> 'Vector2':
        return Vector2(-self.x, -self.y)

    # ------------------------------------------------------------------
    # Products and norms
    # ------------------------------------------------------------------

    def dot(self, other: 'Vector2') -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: 'Vector2') -> float:
        """Z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> 'Vector2':
        """
        Unit vector in the same direction.

        Returns the zero vector (not NaN) when the magnitude is zero.
        """
        length = self.magnitude()
        if length == 0.0:
            return Vector2(0.0, 0.0)
        return Vector2(self.x / length, self.y / length)

    def perpendicular(self) -> 'Vector2':
        """Left-hand normal (-y, x)."""
        return Vector2(-self.y, self.x)

    def distance_to(self, other: 'Vector2') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def rotate(self, angle_rad: float) -> 'Vector2':
        """Rotate about the origin by angle (in radians)."""
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        return Vector2(
            self.x * cos_a - self.y * sin_a,
            self.x * sin_a + self.y * cos_a,
        )

    def rotate_about(self, pivot: 'Vector2', angle_rad: float) -> 'Vector2':
        """Translate to origin, rotate, translate back."""
        return (self - pivot).rotate(angle_rad) + pivot

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"Vector2(x={self.x:.4f}, y={self.y:.4f})"


VectorLike = Union[Vector2, Sequence[float]]

ZERO = Vector2(0.0, 0.0)


def as_vector(value: VectorLike) -> Vector2:
    """Coerce a Vector2, (x, y) pair or {'x', 'y'} mapping to Vector2."""
    if isinstance(value, Vector2):
        return value
    if isinstance(value, dict):
        return Vector2(float(value['x']), float(value['y']))
    x, y = value
    return Vector2(float(x), float(y))
