import math

import pytest

from hectorkit.geometry import Quaternion, StampedTransform, Transform, Vector3
from hectorkit.scan_conversion import (
    LaserFilter,
    LaserScan,
    MapMutex,
    ScanData,
    laser_scan_to_scan_data,
    point_cloud_to_scan_data,
)


def _scan(ranges, angle_min=0.0, increment=0.0):
    return LaserScan(
        ranges=ranges,
        angle_min=angle_min,
        angle_increment=increment,
        range_min=0.5,
        range_max=10.0,
    )


def test_laser_scan_forward_beam_scaled():
    data = laser_scan_to_scan_data(_scan([2.0]), 10.0)
    assert data.origo == (0.0, 0.0)
    assert len(data) == 1
    x, y = data.points[0]
    assert x == pytest.approx(20.0)
    assert y == pytest.approx(0.0)


def test_laser_scan_drops_out_of_range_returns():
    ranges = [0.5, 0.4, 9.95, 10.0, float("nan"), float("inf"), 3.0]
    data = laser_scan_to_scan_data(_scan(ranges), 1.0)
    assert len(data) == 1
    assert data.points[0][0] == pytest.approx(3.0)


def test_laser_scan_angles_advance_per_beam():
    increment = math.pi / 2
    data = laser_scan_to_scan_data(_scan([1.0, 0.1, 1.0], 0.0, increment), 1.0)
    assert len(data) == 2
    # the skipped beam still advances the angle
    x, y = data.points[1]
    assert x == pytest.approx(-1.0)
    assert y == pytest.approx(0.0, abs=1e-12)


def test_laser_scan_points_keep_their_range():
    ranges = [1.0, 2.0, 3.0, 4.0]
    data = laser_scan_to_scan_data(_scan(ranges, -0.3, 0.2), 2.5)
    lengths = [math.hypot(x, y) for x, y in data]
    assert lengths == pytest.approx([r * 2.5 for r in ranges])


def test_point_cloud_identity_transform():
    data = point_cloud_to_scan_data([(1.0, 0.0, 0.0)], Transform.identity(), 4.0, LaserFilter())
    assert data.origo == (0.0, 0.0)
    assert data.points == [pytest.approx((4.0, 0.0))]


def test_point_cloud_distance_filter():
    points = [(0.1, 0.0, 0.0), (40.0, 0.0, 0.0), (2.0, 0.0, 0.0)]
    data = point_cloud_to_scan_data(points, Transform.identity(), 1.0, LaserFilter())
    assert data.points == [pytest.approx((2.0, 0.0))]


def test_point_cloud_drops_close_points_behind_sensor():
    points = [(-0.6, 0.0, 0.0), (-1.0, 0.0, 0.0), (0.6, 0.0, 0.0)]
    data = point_cloud_to_scan_data(points, Transform.identity(), 1.0, LaserFilter())
    assert [p[0] for p in data.points] == pytest.approx([-1.0, 0.6])


def test_point_cloud_height_filter_relative_to_laser():
    laser = Transform(Quaternion(), Vector3(0.0, 0.0, 0.5))
    points = [(2.0, 0.0, 2.0), (2.0, 0.0, -2.0), (3.0, 0.0, 0.2)]
    data = point_cloud_to_scan_data(points, laser, 1.0, LaserFilter())
    assert data.points == [pytest.approx((3.0, 0.0))]


def test_point_cloud_applies_translation_and_rotation():
    laser = Transform(Quaternion.from_rpy(0.0, 0.0, math.pi / 2), Vector3(1.0, 2.0, 0.0))
    stamped = StampedTransform(laser, 0.0, "base_link", "laser")
    data = point_cloud_to_scan_data([Vector3(1.0, 0.0, 0.0)], stamped, 2.0, LaserFilter())
    assert data.origo == pytest.approx((2.0, 4.0))
    assert data.points == [pytest.approx((2.0, 6.0))]


def test_custom_filter_limits():
    limits = LaserFilter(sqr_min_dist=0.0, sqr_max_dist=4.0, z_min=-0.1, z_max=0.1)
    points = [(1.0, 1.0, 0.0), (3.0, 0.0, 0.0), (1.0, 0.0, 0.5)]
    data = point_cloud_to_scan_data(points, Transform.identity(), 1.0, limits)
    assert data.points == [pytest.approx((1.0, 1.0))]


def test_scan_data_iterates_points():
    data = ScanData(points=[(1.0, 2.0), (3.0, 4.0)])
    assert list(data) == [(1.0, 2.0), (3.0, 4.0)]


def test_map_mutex_lock_and_unlock():
    mutex = MapMutex()
    mutex.lock_map()
    assert mutex.locked()
    mutex.unlock_map()
    assert not mutex.locked()


def test_map_mutex_context_manager():
    mutex = MapMutex()
    with mutex as held:
        assert held.locked()
    assert not mutex.locked()


def test_map_mutex_unlock_without_lock_raises():
    with pytest.raises(RuntimeError):
        MapMutex().unlock_map()