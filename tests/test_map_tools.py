import pytest

from hectorkit.geometry import Pose, Vector3
from hectorkit.map_tools import (
    CoordinateTransformer,
    DistanceMeasurementProvider,
    MapMetaData,
    OccupancyGrid,
    get_map_extents,
)


def _grid(width=10, height=10, resolution=1.0, occupied=(), known=(), origin=(0.0, 0.0)):
    data = [-1] * (width * height)
    for x, y in known:
        data[y * width + x] = 0
    for x, y in occupied:
        data[y * width + x] = 100
    info = MapMetaData(resolution, width, height, Pose(position=Vector3(origin[0], origin[1], 0.0)))
    return OccupancyGrid(info=info, data=data)


def test_grid_size_mismatch_raises():
    with pytest.raises(ValueError):
        OccupancyGrid(info=MapMetaData(1.0, 2, 2), data=[0, 0, 0])


def test_transformer_round_trip():
    t = CoordinateTransformer(_grid(resolution=0.05, origin=(-3.0, 4.0)))
    p = (1.7, -2.3)
    assert t.to_c1(t.to_c2(p)) == pytest.approx(p)
    assert t.to_c2((-3.0, 4.0)) == pytest.approx((0.0, 0.0))
    assert t.c2_scale(t.c1_scale(7.0)) == pytest.approx(7.0)


def test_transform_between_maps_reference_points():
    t = CoordinateTransformer()
    t.set_transforms_between((0.0, 0.0), (10.0, 10.0), (5.0, 5.0), (25.0, 25.0))
    assert t.to_c1((0.0, 0.0)) == pytest.approx((5.0, 5.0))
    assert t.to_c1((10.0, 10.0)) == pytest.approx((25.0, 25.0))


def test_transform_between_degenerate_raises():
    with pytest.raises(ValueError):
        CoordinateTransformer().set_transforms_between((1.0, 1.0), (1.0, 2.0), (0.0, 0.0), (3.0, 3.0))


def test_bresenham_hits_obstacle():
    dm = DistanceMeasurementProvider()
    dm.set_map(_grid(occupied=[(5, 0)]))
    assert dm.check_occupancy_bresenham((0, 0), (9, 0)) == (5.0, (5, 0))


def test_bresenham_start_cell_occupied():
    dm = DistanceMeasurementProvider()
    dm.set_map(_grid(occupied=[(2, 2)]))
    assert dm.check_occupancy_bresenham((2, 2), (2, 8)) == (0.0, (2, 2))


def test_bresenham_end_cell_not_checked():
    dm = DistanceMeasurementProvider()
    dm.set_map(_grid(occupied=[(9, 0)]))
    assert dm.check_occupancy_bresenham((0, 0), (9, 0)) == (-1.0, None)


def test_bresenham_outside_map():
    dm = DistanceMeasurementProvider()
    dm.set_map(_grid(occupied=[(5, 0)]))
    assert dm.check_occupancy_bresenham((0, 0), (10, 0)) == (-1.0, None)
    assert dm.check_occupancy_bresenham((-1, 0), (5, 0)) == (-1.0, None)


def test_get_dist_in_world_units():
    grid = _grid(resolution=0.5, occupied=[(5, 0)])
    dm = DistanceMeasurementProvider()
    dm.set_map(grid)
    dist, hit = dm.get_dist((0.25, 0.25), (4.9, 0.25))
    assert dist == pytest.approx(5 * grid.info.resolution)
    assert hit == pytest.approx((5 * grid.info.resolution, 0.0))


def test_get_dist_without_hit_is_negative():
    dm = DistanceMeasurementProvider()
    dm.set_map(_grid())
    dist, hit = dm.get_dist((0.5, 0.5), (8.5, 0.5))
    assert dist < 0.0
    assert hit is None


def test_get_dist_without_map_raises():
    with pytest.raises(RuntimeError):
        DistanceMeasurementProvider().get_dist((0.0, 0.0), (1.0, 1.0))


def test_map_extents():
    grid = _grid(known=[(2, 3)], occupied=[(4, 1)])
    assert get_map_extents(grid) == ((2, 1), (5, 4))


def test_map_extents_all_unknown():
    assert get_map_extents(_grid()) is None