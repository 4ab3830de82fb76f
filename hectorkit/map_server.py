"""Map service with obstacle-distance and search-position queries."""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from hectorkit.geometry import (
    Header,
    Pose,
    PoseStamped,
    Transform,
    TransformError,
    Vector3,
)
from hectorkit.map_tools import DistanceMeasurementProvider, OccupancyGrid

logger = logging.getLogger(__name__)

TransformLookup = Callable[[str, str, float], Transform]

_RAY_LENGTH = 5.0


class MapServer:
    """Serves the latest map and answers geometric queries against it.

    ``lookup_transform(target_frame, source_frame, stamp)`` must return the
    transform taking points in ``source_frame`` to ``target_frame`` or raise
    :class:`TransformError`.
    """

    def __init__(self, lookup_transform: TransformLookup) -> None:
        self._lookup_transform = lookup_transform
        self._grid: Optional[OccupancyGrid] = None
        self._dist_meas = DistanceMeasurementProvider()

    def map_callback(self, grid: OccupancyGrid) -> None:
        self._grid = grid
        self._dist_meas.set_map(grid)

    def _require_map(self, what: str) -> OccupancyGrid:
        if self._grid is None:
            logger.info("map_server has no map yet, no %s available", what)
            raise LookupError(f"map_server has no map yet, no {what} available")
        return self._grid

    def map_service(self) -> OccupancyGrid:
        """Return the latest map."""
        logger.info("hector_map_server map service called")
        return self._require_map("map service")

    def _lookup(self, target: str, source: str, stamp: float, context: str) -> Transform:
        try:
            return self._lookup_transform(target, source, stamp)
        except TransformError as exc:
            logger.error("Transform failed in %s service call: %s", context, exc)
            raise

    def distance_to_obstacle(self, point, frame_id: str, stamp: float) -> float:
        """Distance along the ray from the frame origin through a point to the first obstacle.

        Returns -1.0 when no obstacle is hit within the ray.
        """
        grid = self._require_map("lookup service")
        transform = self._lookup(grid.header.frame_id, frame_id, stamp, "lookup distance")

        v1 = transform.apply(Vector3())
        v2 = transform.apply(Vector3(*point))
        diff = v2 - v1
        horizontal = Vector3(diff.x, diff.y, 0.0).length()
        if horizontal == 0.0:
            raise ValueError("ray direction has no horizontal component")
        v2 = v1 + diff / horizontal * _RAY_LENGTH

        dist, _ = self._dist_meas.get_dist((v1.x, v1.y), (v2.x, v2.y))
        if dist < 0.0:
            return -1.0
        diff = v2 - v1
        angle = diff.angle(Vector3(diff.x, diff.y, 0.0))
        return dist / math.cos(angle)

    def search_position(self, ooi_pose: PoseStamped, distance: float) -> PoseStamped:
        """Pose at the given distance behind an object of interest, in the map frame."""
        grid = self._require_map("get best search pos service")
        map_frame = grid.header.frame_id
        transform = self._lookup(
            map_frame, ooi_pose.header.frame_id, ooi_pose.header.stamp, "getSearchPosition"
        )
        transformed = transform.compose(Transform(ooi_pose.pose.orientation, ooi_pose.pose.position))
        origin = transformed.origin + transformed.rotation.rotate(Vector3(-distance, 0.0, 0.0))
        return PoseStamped(
            header=Header(stamp=ooi_pose.header.stamp, frame_id=map_frame),
            pose=Pose(position=origin, orientation=transformed.rotation),
        )