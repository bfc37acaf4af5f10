"""Tests for SAT collision, the MTV and facet region predicates."""

import math

import pytest

from config import GeometryConfig
from core import collision
from core.collision import FacetRegion, find_collisions, polygons_overlap
from core.polygon import OrientedRect, Polygon, PreconditionError
from core.vector import Vector2


def rect(x, y, w, h, angle=0.0):
    return OrientedRect(Vector2(x, y), w, h, angle).to_polygon()


# Pairs that overlap, including rotation and full containment
OVERLAPPING_PAIRS = [
    (rect(50, 50, 100, 100), rect(140, 50, 100, 100)),
    (rect(0, 0, 40, 20, 0.5), rect(15, 5, 30, 30, -0.26)),
    (rect(0, 0, 10, 10), rect(5, 0, 100, 100)),
    (rect(0, 0, 100, 100), rect(1, 2, 10, 10, 0.7)),
    (rect(10, 10, 30, 30, math.pi / 4), rect(30, 20, 30, 30)),
    (Polygon([(0, 0), (60, 0), (30, 50)]), rect(30, 40, 20, 20, 0.2)),
]


class TestCollisionDetection:

    def test_separated_rects(self):
        result = collision.test_collision(rect(50, 50, 100, 100), rect(250, 50, 100, 100))

        assert not result.collided
        assert result.overlap == Vector2(0, 0)
        assert not result

    def test_overlapping_rects_mtv(self):
        result = collision.test_collision(rect(50, 50, 100, 100), rect(140, 50, 100, 100))

        assert result.collided
        assert result.overlap.x == pytest.approx(10)
        assert result.overlap.y == pytest.approx(0, abs=1e-9)
        assert result.depth == pytest.approx(10)

    def test_detection_is_symmetric(self):
        a = rect(50, 50, 100, 100)
        b = rect(140, 50, 100, 100)

        forward = collision.test_collision(a, b)
        backward = collision.test_collision(b, a)

        assert forward.collided and backward.collided
        assert backward.overlap.x == pytest.approx(-forward.overlap.x)
        assert backward.depth == pytest.approx(forward.depth)

    def test_touching_edges_do_not_collide(self):
        a = rect(50, 50, 100, 100)
        b = rect(150, 50, 100, 100)
        assert not collision.test_collision(a, b).collided

    def test_accepts_oriented_rects(self):
        a = OrientedRect(Vector2(0, 0), 10, 10)
        b = OrientedRect(Vector2(5, 0), 10, 10)
        assert collision.test_collision(a, b).collided

    @pytest.mark.parametrize("a, b", OVERLAPPING_PAIRS)
    def test_mtv_separates(self, a, b):
        result = collision.test_collision(a, b)
        assert result.collided

        moved = a.translated(-result.overlap)
        assert not collision.test_collision(moved, b).collided

    @pytest.mark.parametrize("a, b", OVERLAPPING_PAIRS)
    def test_mtv_points_from_first_to_second(self, a, b):
        result = collision.test_collision(a, b)
        towards_b = b.centroid() - a.centroid()
        assert result.overlap.dot(towards_b) >= 0


class TestDegenerateInputs:

    def test_zero_size_rect_never_collides(self):
        marker = OrientedRect(Vector2(50, 50), 0, 0)
        assert not collision.test_collision(marker, rect(50, 50, 100, 100)).collided
        assert not collision.test_collision(rect(50, 50, 100, 100), marker).collided

    def test_two_vertex_polygon_never_collides(self):
        segment = Polygon([(0, 0), (100, 100)])
        assert not collision.test_collision(segment, rect(50, 50, 100, 100)).collided

    def test_collinear_polygon_never_collides(self):
        line = Polygon([(0, 50), (50, 50), (100, 50)])
        assert not collision.test_collision(line, rect(50, 50, 100, 100)).collided

    def test_convexity_validated_when_asked(self, l_facet):
        strict = GeometryConfig(validate_convexity=True)
        with pytest.raises(PreconditionError):
            collision.test_collision(l_facet, rect(50, 50, 10, 10), strict)

    def test_convexity_not_validated_by_default(self, l_facet):
        collision.test_collision(l_facet, rect(50, 50, 10, 10))

    def test_not_collected_as_a_test(self):
        assert collision.test_collision.__test__ is False


class TestPairwiseHelpers:

    def test_polygons_overlap(self):
        assert polygons_overlap(rect(0, 0, 10, 10), rect(5, 5, 10, 10))
        assert not polygons_overlap(rect(0, 0, 10, 10), rect(10, 0, 10, 10))
        assert not polygons_overlap(rect(0, 0, 10, 10), rect(100, 100, 10, 10))

    def test_collides_with_any(self):
        others = [rect(100, 0, 10, 10), rect(8, 0, 10, 10)]
        assert collision.collides_with_any(rect(0, 0, 10, 10), others)
        assert not collision.collides_with_any(rect(0, 0, 10, 10), others[:1])

    def test_find_collisions(self):
        shapes = [
            rect(0, 0, 10, 10),
            rect(10, 0, 10, 10),
            rect(15, 0, 10, 10),
            rect(50, 50, 10, 10),
        ]
        assert find_collisions(shapes) == [(1, 2)]


class TestFacetRegion:

    def test_contains_with_boundary_contact(self, square_facet):
        region = FacetRegion(square_facet)

        assert region.contains(rect(10, 10, 20, 20))
        assert region.contains(rect(100, 100, 200, 200))
        assert not region.contains(rect(195, 100, 20, 20))
        assert not region.contains(rect(500, 500, 20, 20))

    def test_overlap_excludes_touching(self, square_facet):
        region = FacetRegion(square_facet)

        assert region.overlaps(rect(195, 100, 20, 20))
        assert not region.overlaps(rect(210, 100, 20, 20))
        assert not region.overlaps(rect(250, 100, 20, 20))

    def test_non_convex_facet(self, l_facet):
        region = FacetRegion(l_facet)

        assert region.contains(rect(50, 50, 20, 20))
        assert region.contains(rect(150, 150, 20, 20))
        assert not region.contains(rect(150, 50, 20, 20))
        assert not region.overlaps(rect(150, 50, 20, 20))

    def test_accepts_policy(self, square_facet):
        region = FacetRegion(square_facet)
        straddling = rect(195, 100, 20, 20)

        assert not region.accepts(straddling, 'inside')
        assert region.accepts(straddling, 'overlap')
        with pytest.raises(ValueError):
            region.accepts(straddling, 'nearby')

    def test_degenerate_facet_accepts_nothing(self):
        region = FacetRegion(Polygon([(0, 0), (100, 100)]))
        assert not region.contains(rect(10, 10, 5, 5))
        assert not region.overlaps(rect(10, 10, 5, 5))

    def test_one_off_helpers(self, square_facet):
        assert collision.contains(square_facet, rect(10, 10, 20, 20))
        assert collision.overlaps_region(square_facet, rect(200, 10, 20, 20))
