"""Tests for the drag resolver: push-out, proximity snap and ranking."""

import pytest

from config import SnapConfig
from core import collision
from core.polygon import OrientedRect
from core.vector import Vector2
from placement.snap import (
    SceneSnapshot,
    SnapAxis,
    SnapResolver,
    compute_frame,
    resolve_move,
)


def panel(x, y, w=10, h=10, angle=0.0):
    return OrientedRect(Vector2(x, y), w, h, angle)


class TestProximitySnap:

    def test_snaps_along_smaller_axis(self):
        static = panel(200, 200, 100, 50)
        marker = panel(213, 200, 0, 0)

        snapped = resolve_move(marker, [static], Vector2(213, 200), threshold=15)

        assert snapped.center.x == pytest.approx(200)
        assert snapped.center.y == pytest.approx(200)

    def test_snaps_full_panel_when_distance_first(self):
        static = panel(200, 200, 100, 50)
        moving = panel(213, 200, 100, 50)
        config = SnapConfig(threshold=15, collision_priority=False)

        snapped = resolve_move(moving, [static], Vector2(213, 200), config=config)

        assert snapped.center.x == pytest.approx(200)
        assert snapped.center.y == pytest.approx(200)

    def test_unchanged_beyond_threshold(self):
        static = panel(200, 200, 100, 50)
        moving = panel(400, 400, 20, 20)

        snapped = resolve_move(moving, [static], Vector2(400, 400), threshold=15)

        assert snapped == moving

    def test_threshold_is_inclusive(self):
        static = panel(200, 200, 100, 50)
        marker = panel(215, 200, 0, 0)

        snapped = resolve_move(marker, [static], Vector2(215, 200), threshold=15)

        assert snapped.center.x == pytest.approx(200)
        assert snapped.center.y == pytest.approx(200)

    def test_aligned_axis_is_skipped(self):
        static = panel(0, 12)
        moving = panel(0, 0)

        snapped = resolve_move(moving, [static], Vector2(0, 0), threshold=15)

        assert snapped.center == Vector2(0, 2)

    def test_aligned_axis_blocks_when_enabled(self):
        static = panel(0, 12)
        moving = panel(0, 0)
        config = SnapConfig(threshold=15, aligned_axis_blocks=True)

        resolution = SnapResolver(config).resolve(moving, [static], Vector2(0, 0))

        assert not resolution.snapped
        assert resolution.rect == moving

    def test_degenerate_static_offers_no_snap(self):
        marker = OrientedRect(Vector2(5, 0), 0, 0)
        moving = panel(0, 0, 20, 20)

        resolution = SnapResolver().resolve(moving, [marker], Vector2(0, 0))

        assert not resolution.snapped
        assert resolution.candidates == ()
        assert resolution.rect == moving

    def test_rotation_passes_through(self):
        static = panel(0, 0, 10, 10)
        moving = panel(3, 40, 10, 10, 0.3)

        snapped = resolve_move(moving, [static], Vector2(3, 40))

        assert snapped.rotation == 0.3
        assert snapped.width == 10 and snapped.height == 10

    def test_pointer_picks_nearest_static(self):
        above = panel(0, 18)
        right = panel(20, 0)
        moving = panel(0, 0)
        resolver = SnapResolver(SnapConfig(threshold=15))

        towards_right = resolver.resolve(moving, [above, right], Vector2(12, 0))
        assert towards_right.snap.source_id == 1
        assert towards_right.snap.axis is SnapAxis.X
        assert towards_right.position == Vector2(10, 0)

        towards_above = resolver.resolve(moving, [above, right], Vector2(0, 10))
        assert towards_above.snap.source_id == 0
        assert towards_above.snap.axis is SnapAxis.Y
        assert towards_above.position == Vector2(0, 8)

        assert len(towards_right.candidates) == 2

    def test_equal_pointer_distance_goes_to_input_order(self):
        left = panel(-20, 0)
        right = panel(20, 0)
        moving = panel(0, 0)

        first = resolve_move(moving, [right, left], Vector2(0, 0))
        assert first.center.x == pytest.approx(10)

        second = resolve_move(moving, [left, right], Vector2(0, 0))
        assert second.center.x == pytest.approx(-10)

    def test_tie_break_axis(self):
        static = panel(20, 20)
        moving = panel(0, 0)

        by_x = resolve_move(moving, [static], Vector2(0, 0))
        assert by_x.center == Vector2(10, 0)

        by_y = resolve_move(moving, [static], Vector2(0, 0), config=SnapConfig(tie_break='y'))
        assert by_y.center == Vector2(0, 10)

    def test_corner_mode_moves_both_axes(self):
        static = panel(20, 20)
        moving = panel(0, 0)

        resolution = SnapResolver(SnapConfig(snap_mode='corner')).resolve(
            moving, [static], Vector2(0, 0)
        )

        assert resolution.snap.axis is SnapAxis.BOTH
        assert resolution.position.x == pytest.approx(10)
        assert resolution.position.y == pytest.approx(10)

    def test_snap_into_another_static_is_skipped(self):
        below = panel(0, -17)
        wedge = OrientedRect(Vector2(7, -8.5), 6, 5)
        moving = panel(0, 0)
        statics = [below, wedge]

        resolution = SnapResolver().resolve(moving, statics, Vector2(0, -17))

        assert resolution.snap.source_id == 1
        assert resolution.position == Vector2(-1, 0)
        for static in statics:
            assert not collision.test_collision(resolution.rect.to_polygon(), static.to_polygon())

    def test_snap_revalidation_can_be_disabled(self):
        below = panel(0, -17)
        wedge = OrientedRect(Vector2(7, -8.5), 6, 5)

        resolution = SnapResolver(SnapConfig(revalidate_snap=False)).resolve(
            panel(0, 0), [below, wedge], Vector2(0, -17)
        )

        assert resolution.snap.source_id == 0
        assert resolution.position == Vector2(0, -7)


class TestCollisionPushOut:

    def test_push_out_clears_collision(self):
        static = panel(200, 200, 100, 50)
        moving = panel(213, 200, 100, 50)

        resolution = SnapResolver().resolve(moving, [static], Vector2(213, 200))

        assert resolution.collided
        assert resolution.position.x == pytest.approx(213)
        assert not collision.test_collision(resolution.rect, static).collided

    def test_collided_static_offers_no_snap(self):
        static = panel(0, 0, 100, 100)
        moving = panel(70, 0, 60, 60)

        resolution = SnapResolver().resolve(moving, [static], Vector2(70, 0))

        assert resolution.collided
        assert not resolution.snapped
        assert resolution.position.x == pytest.approx(80)
        assert resolution.position.y == pytest.approx(0)

    def test_sequential_push_out_against_several_statics(self):
        statics = [panel(0, 0, 100, 100), panel(300, 0, 100, 100)]
        moving = panel(70, 0, 60, 60)

        resolution = SnapResolver().resolve(moving, statics, Vector2(70, 0))

        assert len(resolution.corrections) == 1
        assert resolution.corrections[0].source_id == 0
        assert resolution.corrections[0].offset.x == pytest.approx(10)
        for static in statics:
            assert not collision.test_collision(resolution.rect, static).collided

    def test_two_statics_colliding_at_once(self):
        left = panel(0, 0, 100, 100)
        top = panel(60, 100, 100, 100)
        moving = panel(60, 40, 40, 40)
        assert collision.test_collision(moving, left).collided
        assert collision.test_collision(moving, top).collided

        resolution = SnapResolver().resolve(moving, [left, top], Vector2(60, 40))

        assert [c.source_id for c in resolution.corrections] == [0, 1]
        assert resolution.corrections[0].offset.x == pytest.approx(10)
        assert resolution.corrections[1].offset.y == pytest.approx(-10)
        assert resolution.position.x == pytest.approx(70)
        assert resolution.position.y == pytest.approx(30)
        assert not resolution.snapped
        for static in (left, top):
            assert not collision.test_collision(resolution.rect, static).collided

    @pytest.mark.parametrize("x, y, angle", [
        (213, 200, 0.0),
        (180, 190, 0.4),
        (250, 215, 1.2),
        (200, 200, 0.0),
    ])
    def test_single_static_never_left_overlapping(self, x, y, angle):
        static = panel(200, 200, 100, 50)
        moving = panel(x, y, 60, 30, angle)

        resolution = SnapResolver().resolve(moving, [static], Vector2(x, y))

        assert not collision.test_collision(resolution.rect, static).collided

    def test_degenerate_static_is_ignored(self):
        moving = panel(0, 0, 20, 20)
        marker = panel(0, 0, 0, 0)

        resolution = SnapResolver().resolve(moving, [marker], Vector2(0, 0))

        assert not resolution.collided
        assert resolution.rect == moving


class TestFrames:

    def test_compute_frame_moves_to_pointer(self):
        snapshot = SceneSnapshot(
            moving=panel(0, 0, 0, 0),
            statics=(panel(200, 200, 100, 50),),
            threshold=15,
            ids=('door',),
        )

        resolution = compute_frame(Vector2(213, 200), snapshot)

        assert resolution.raw.center == Vector2(213, 200)
        assert resolution.position.x == pytest.approx(200)
        assert resolution.snap.source_id == 'door'

    def test_frames_are_independent(self):
        snapshot = SceneSnapshot(moving=panel(0, 0), statics=(panel(20, 0),))

        first = compute_frame((100, 100), snapshot)
        compute_frame((0, 0), snapshot)
        again = compute_frame((100, 100), snapshot)

        assert first.rect == again.rect
        assert snapshot.moving == panel(0, 0)

    def test_reports_facet_containment(self, square_facet):
        snapshot = SceneSnapshot(moving=panel(0, 0, 20, 20), boundary=square_facet)

        assert compute_frame((100, 100), snapshot).on_facet is True
        assert compute_frame((500, 500), snapshot).on_facet is False

    def test_no_facet_no_report(self):
        snapshot = SceneSnapshot(moving=panel(0, 0, 20, 20))
        assert compute_frame((100, 100), snapshot).on_facet is None

    def test_accepts_polygon_statics(self):
        static = panel(20, 0).to_polygon()
        resolution = SnapResolver().resolve(panel(0, 0), [static], Vector2(20, 0))
        assert resolution.position == Vector2(10, 0)


class TestConfiguration:

    def test_unknown_tie_break(self):
        with pytest.raises(ValueError):
            SnapResolver(SnapConfig(tie_break='z'))

    def test_unknown_snap_mode(self):
        with pytest.raises(ValueError):
            SnapResolver(SnapConfig(snap_mode='edge'))
