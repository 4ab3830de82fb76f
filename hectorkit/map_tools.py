"""Occupancy grid types, coordinate transforms and ray-cast distance queries."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from hectorkit.geometry import Header, Pose

Point2 = Tuple[float, float]
Cell = Tuple[int, int]

_MAX_TRACE = 5000
_OCCUPIED = 100
_UNKNOWN = -1


@dataclass(frozen=True)
class MapMetaData:
    resolution: float
    width: int
    height: int
    origin: Pose = field(default_factory=Pose)


@dataclass(eq=False)
class OccupancyGrid:
    """Row-major occupancy grid: -1 unknown, 0 free, 100 occupied."""

    info: MapMetaData
    data: np.ndarray
    header: Header = field(default_factory=Header)

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data, dtype=np.int8).reshape(-1)
        expected = self.info.width * self.info.height
        if self.data.size != expected:
            raise ValueError(f"grid data has {self.data.size} cells, expected {expected}")


class CoordinateTransformer:
    """Linear map between coordinate system 1 (world) and 2 (map cells)."""

    def __init__(self, meta=None) -> None:
        self._origo: Point2 = (0.0, 0.0)
        self._scale = 1.0
        self._inv_scale = 1.0
        if meta is not None:
            self.set_transforms(meta)

    def set_transforms(self, meta) -> None:
        """Set up from map metadata or from an occupancy grid."""
        if isinstance(meta, OccupancyGrid):
            meta = meta.info
        if meta.resolution == 0:
            raise ValueError("map resolution must be non-zero")
        self._origo = (float(meta.origin.position.x), float(meta.origin.position.y))
        self._scale = float(meta.resolution)
        self._inv_scale = 1.0 / float(meta.resolution)

    @staticmethod
    def _linear_transform(cs1: Point2, cs2: Point2) -> Tuple[float, float]:
        if cs1[0] == cs1[1]:
            raise ValueError("coordinate system reference points must differ")
        scaling = (cs2[0] - cs2[1]) / (cs1[0] - cs1[1])
        return scaling, cs2[0] - cs1[0] * scaling

    def set_transforms_between(self, origo_cs1, end_cs1, origo_cs2, end_cs2) -> None:
        """Derive the transform from two corresponding point pairs."""
        x_scale, x_shift = self._linear_transform((origo_cs1[0], end_cs1[0]), (origo_cs2[0], end_cs2[0]))
        _, y_shift = self._linear_transform((origo_cs1[1], end_cs1[1]), (origo_cs2[1], end_cs2[1]))
        if x_scale == 0:
            raise ValueError("degenerate transform with zero scale")
        self._origo = (x_shift, y_shift)
        self._scale = x_scale
        self._inv_scale = 1.0 / x_scale

    def to_c1(self, coords) -> Point2:
        x, y = coords
        return (self._origo[0] + x * self._scale, self._origo[1] + y * self._scale)

    def to_c2(self, coords) -> Point2:
        x, y = coords
        return ((x - self._origo[0]) * self._inv_scale, (y - self._origo[1]) * self._inv_scale)

    def c1_scale(self, c2_scale: float) -> float:
        return self._scale * c2_scale

    def c2_scale(self, c1_scale: float) -> float:
        return self._inv_scale * c1_scale


class DistanceMeasurementProvider:
    """Casts rays through an occupancy grid to find the nearest obstacle."""

    def __init__(self) -> None:
        self._grid: Optional[OccupancyGrid] = None
        self._transformer = CoordinateTransformer()

    def set_map(self, grid: OccupancyGrid) -> None:
        self._grid = grid
        self._transformer.set_transforms(grid)

    def _require_map(self) -> OccupancyGrid:
        if self._grid is None:
            raise RuntimeError("no map has been set")
        return self._grid

    def get_dist(self, begin_world, end_world) -> Tuple[float, Optional[Point2]]:
        """Return (distance, hit point) in world units.

        The distance is negative when no occupied cell lies on the ray.
        """
        self._require_map()
        begin = tuple(int(c) for c in self._transformer.to_c2(begin_world))
        end = tuple(int(c) for c in self._transformer.to_c2(end_world))
        dist, hit = self.check_occupancy_bresenham(begin, end)
        hit_world = self._transformer.to_c1(hit) if hit is not None else None
        return self._transformer.c1_scale(dist), hit_world

    def check_occupancy_bresenham(self, begin_map, end_map) -> Tuple[float, Optional[Cell]]:
        """Trace a ray in cell coordinates; return (cell distance, hit cell) or (-1.0, None)."""
        grid = self._require_map()
        size_x, size_y = grid.info.width, grid.info.height
        x0, y0 = begin_map
        x1, y1 = end_map
        if not (0 <= x0 < size_x and 0 <= y0 < size_y):
            return -1.0, None
        if not (0 <= x1 < size_x and 0 <= y1 < size_y):
            return -1.0, None

        dx, dy = x1 - x0, y1 - y0
        abs_dx, abs_dy = abs(dx), abs(dy)
        step_x = 1 if dx > 0 else -1
        step_y = (1 if dy > 0 else -1) * size_x
        start = y0 * size_x + x0

        if abs_dx >= abs_dy:
            hit = self._trace(grid.data, abs_dx, abs_dy, abs_dx // 2, step_x, step_y, start)
        else:
            hit = self._trace(grid.data, abs_dy, abs_dx, abs_dy // 2, step_y, step_x, start)

        if hit is None:
            return -1.0, None
        hx, hy = hit % size_x, hit // size_x
        return float(int(math.hypot(x0 - hx, y0 - hy))), (hx, hy)

    @staticmethod
    def _trace(data, abs_da, abs_db, error_b, offset_a, offset_b, offset) -> Optional[int]:
        for _ in range(min(_MAX_TRACE, abs_da)):
            if data[offset] == _OCCUPIED:
                return int(offset)
            offset += offset_a
            error_b += abs_db
            if error_b >= abs_da:
                offset += offset_b
                error_b -= abs_da
        return None


def get_map_extents(grid: OccupancyGrid) -> Optional[Tuple[Cell, Cell]]:
    """Bounding box of known cells as (top_left, bottom_right exclusive), or None."""
    known = grid.data.reshape(grid.info.height, grid.info.width) != _UNKNOWN
    ys, xs = np.nonzero(known)
    if xs.size == 0:
        return None
    return (int(xs.min()), int(ys.min())), (int(xs.max()) + 1, int(ys.max()) + 1)