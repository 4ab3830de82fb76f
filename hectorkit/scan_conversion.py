"""Conversion of laser scans and point clouds into planar scan data for mapping."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from hectorkit.geometry import Header, StampedTransform, Transform, Vector3

Point2 = Tuple[float, float]

# Points behind the sensor and this close to it (squared distance) are dropped.
_SQR_NEAR_REAR_LIMIT = 0.5
# Returns within this margin of the maximum range are treated as "no return".
_MAX_RANGE_MARGIN = 0.1


@dataclass(frozen=True)
class LaserScan:
    """A planar laser scan: one range per beam, beams spaced evenly in angle."""

    ranges: Sequence[float]
    angle_min: float
    angle_increment: float
    range_min: float
    range_max: float
    header: Header = field(default_factory=Header)


@dataclass
class ScanData:
    """Scan end points in map scale, together with the sensor origin."""

    origo: Point2 = (0.0, 0.0)
    points: List[Point2] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point2]:
        return iter(self.points)


@dataclass(frozen=True)
class LaserFilter:
    """Limits applied to point-cloud points before they enter the scan data.

    Distances are squared planar distances from the sensor; heights are
    relative to the sensor.
    """

    sqr_min_dist: float = 0.4 * 0.4
    sqr_max_dist: float = 30.0 * 30.0
    z_min: float = -1.0
    z_max: float = 1.0


def laser_scan_to_scan_data(scan: LaserScan, scale_to_map: float) -> ScanData:
    """Turn the valid returns of a laser scan into end points scaled to the map."""
    data = ScanData(origo=(0.0, 0.0))
    max_range = scan.range_max - _MAX_RANGE_MARGIN
    angle = scan.angle_min
    for dist in scan.ranges:
        if scan.range_min < dist < max_range:
            scaled = dist * scale_to_map
            data.points.append((math.cos(angle) * scaled, math.sin(angle) * scaled))
        angle += scan.angle_increment
    return data


def _coords(point) -> Tuple[float, float, float]:
    if isinstance(point, Vector3):
        return point.x, point.y, point.z
    x, y, z = point
    return float(x), float(y), float(z)


def point_cloud_to_scan_data(
    points: Iterable,
    laser_transform: Union[Transform, StampedTransform],
    scale_to_map: float,
    laser_filter: LaserFilter,
) -> ScanData:
    """Transform sensor-frame points into the base frame, filter them and scale to the map."""
    transform = (
        laser_transform.transform
        if isinstance(laser_transform, StampedTransform)
        else laser_transform
    )
    laser_pos = transform.origin
    data = ScanData(origo=(laser_pos.x * scale_to_map, laser_pos.y * scale_to_map))

    for point in points:
        x, y, z = _coords(point)
        dist_sqr = x * x + y * y
        if not laser_filter.sqr_min_dist < dist_sqr < laser_filter.sqr_max_dist:
            continue
        if x < 0.0 and dist_sqr < _SQR_NEAR_REAR_LIMIT:
            continue
        base = transform.apply(Vector3(x, y, z))
        height = base.z - laser_pos.z
        if laser_filter.z_min < height < laser_filter.z_max:
            data.points.append((base.x * scale_to_map, base.y * scale_to_map))
    return data


class MapMutex:
    """Guards a map against concurrent modification and reading."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def lock_map(self) -> None:
        self._lock.acquire()

    def unlock_map(self) -> None:
        """Release the map; raises RuntimeError when it is not locked."""
        self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()

    def __enter__(self) -> MapMutex:
        self.lock_map()
        return self

    def __exit__(self, *exc) -> None:
        self.unlock_map()