# hectorkit

Building blocks for 2D laser SLAM front-ends, in plain Python with NumPy.

## Modules

- `hectorkit.geometry`: `Vector3`, `Quaternion` (with `from_rpy`, `to_rpy`,
  `yaw`, `rotate`), `Transform` (with `identity`, `apply`, `compose`,
  `inverse`), `StampedTransform`, the pose message types `Header`, `Pose`,
  `PoseStamped` and `PoseWithCovarianceStamped`, and the `TransformError`
  exception.
- `hectorkit.pose_info`: `PoseInfoContainer.update` turns a planar pose
  `(x, y, yaw)` and its 3×3 covariance into `pose_stamped`,
  `pose_with_covariance_stamped` (a 6×6 covariance laid out row-major) and
  `tf_transform`.
- `hectorkit.map_tools`: `OccupancyGrid` and `MapMetaData`;
  `CoordinateTransformer` maps between world and cell coordinates;
  `DistanceMeasurementProvider` casts a Bresenham ray through the grid to the
  first occupied cell (at most 5000 cells); `get_map_extents` gives the
  bounding box of the known cells.
- `hectorkit.drawings`: `HectorDrawings` collects visualisation `Marker`s
  (points, arrows, covariance ellipses) and hands each batch to a publish
  callback; `DebugInfoProvider` records determinant and condition numbers of
  scan-matching Hessians as `IterData`.
- `hectorkit.trajectory`: `TrajectoryServer` records the poses of a source
  frame in a target frame, clears them on a `"reset"` command and answers
  recovery queries with `RecoveryInfo` (raising `LookupError` when there is
  no path out of the requested radius).
- `hectorkit.map_server`: `MapServer` serves the latest map and answers
  distance-to-obstacle and search-position queries; it raises `LookupError`
  while no map has been received.
- `hectorkit.scan_conversion`: `laser_scan_to_scan_data` and
  `point_cloud_to_scan_data` turn a `LaserScan` or a sensor-frame point cloud
  into `ScanData`, the latter filtered by a `LaserFilter`. `MapMutex` guards a
  map, and can be used as a context manager.

Frame lookups are supplied by the caller: `TrajectoryServer` takes a
`lookup_pose(target_frame, pose)` function and `MapServer` a
`lookup_transform(target_frame, source_frame, stamp)` function; either may
raise `TransformError`.

## Installation

```
pip install hectorkit
```

To run the tests:

```
pip install "hectorkit[test]"
pytest
```

## Example

```python
from hectorkit.map_tools import (
    DistanceMeasurementProvider,
    MapMetaData,
    OccupancyGrid,
    get_map_extents,
)

# A 10×10 grid with 0.5 m cells. Cell (7, 2) is occupied, every other cell is free.
data = [0] * 100
data[2 * 10 + 7] = 100
grid = OccupancyGrid(info=MapMetaData(resolution=0.5, width=10, height=10), data=data)

provider = DistanceMeasurementProvider()
provider.set_map(grid)
print(provider.get_dist((0.25, 1.25), (4.75, 1.25)))  # (3.5, (3.5, 1.0))

print(get_map_extents(grid))  # ((0, 0), (10, 10))
```

Transforms compose and invert:

```python
from hectorkit.geometry import Quaternion, Transform, Vector3

t = Transform(rotation=Quaternion.from_rpy(0.0, 0.0, 1.57), origin=Vector3(1.0, 2.0, 0.0))
p = t.apply(Vector3(1.0, 0.0, 0.0))
back = t.inverse().apply(p)  # close to Vector3(1.0, 0.0, 0.0)
```

## What this package does not do

It has no scan matcher and does not build maps: it converts scans into
`ScanData` and publishes grids handed to it, but nothing here updates an
occupancy grid from scans. It has no message transport, node runtime or
transform tree of its own; publishing and frame lookups are callbacks you
provide. There is no command-line program.