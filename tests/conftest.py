"""Shared fixtures for the geometry core tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from core.polygon import OrientedRect, Polygon
from core.vector import Vector2


@pytest.fixture
def square_facet():
    """Axis-aligned 200 x 200 facet at the origin."""
    return Polygon([(0, 0), (200, 0), (200, 200), (0, 200)])


@pytest.fixture
def l_facet():
    """Non-convex L-shaped facet: 200 x 200 square minus its top-right quadrant."""
    return Polygon([
        (0, 0), (100, 0), (100, 100), (200, 100), (200, 200), (0, 200),
    ])


@pytest.fixture
def seed_cell():
    """20 x 20 seed panel in the corner of the square facet."""
    return OrientedRect(Vector2(10, 10), 20, 20)
