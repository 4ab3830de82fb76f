"""Debug marker drawing and scan-matcher debug information collection."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from hectorkit.geometry import Header, Pose, Quaternion, Vector3


class MarkerType(enum.IntEnum):
    """Marker shapes, numbered as in the visualization message definition."""

    ARROW = 0
    CUBE = 1
    SPHERE = 2
    CYLINDER = 3


class MarkerAction(enum.IntEnum):
    ADD = 0
    DELETE = 2


@dataclass(frozen=True)
class Color:
    r: float = 1.0
    g: float = 1.0
    b: float = 1.0
    a: float = 1.0


@dataclass(frozen=True)
class Marker:
    """A single visualization marker."""

    header: Header = field(default_factory=lambda: Header(frame_id="map"))
    ns: str = "slam"
    id: int = 0
    type: MarkerType = MarkerType.CUBE
    action: MarkerAction = MarkerAction.ADD
    pose: Pose = field(default_factory=Pose)
    scale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    color: Color = field(default_factory=Color)


def _ignore(_: object) -> None:
    pass


class HectorDrawings:
    """Collects markers and hands them to a publisher in batches."""

    def __init__(self, publish: Optional[Callable[[List[Marker]], None]] = None) -> None:
        self._publish = publish or _ignore
        self.id_counter = 0
        self.markers: List[Marker] = []
        self.template = Marker()
        self.set_scale(1.0)
        self.set_color(1.0, 1.0, 1.0)

    def _with_position(self, x: float, y: float, qz: float, qw: float) -> Pose:
        pos = self.template.pose.position
        ori = self.template.pose.orientation
        return Pose(
            position=Vector3(float(x), float(y), pos.z),
            orientation=Quaternion(ori.x, ori.y, float(qz), float(qw)),
        )

    def _emit(self, **changes) -> None:
        self.template = replace(self.template, id=self.id_counter, **changes)
        self.id_counter += 1
        self.markers.append(self.template)

    def draw_point(self, point) -> None:
        """Add a cube marker at a world (x, y) point."""
        x, y = point
        self._emit(pose=self._with_position(x, y, 0.0, 0.0), type=MarkerType.CUBE)

    def draw_arrow(self, pose) -> None:
        """Add an arrow marker for a world (x, y, yaw) pose."""
        x, y, yaw = pose
        self._emit(
            pose=self._with_position(x, y, math.sin(yaw * 0.5), math.cos(yaw * 0.5)),
            type=MarkerType.ARROW,
        )

    def draw_covariance(self, mean, cov) -> None:
        """Add a flat cylinder showing a 2x2 covariance ellipse around a mean."""
        matrix = np.asarray(cov, dtype=float)
        if matrix.shape != (2, 2):
            raise ValueError(f"covariance must be 2x2, got shape {matrix.shape}")
        values, vectors = np.linalg.eigh(matrix)
        angle = math.atan2(vectors[1, 0], vectors[0, 0])
        mx, my = mean
        self._emit(
            pose=self._with_position(mx, my, math.sin(angle * 0.5), math.cos(angle * 0.5)),
            type=MarkerType.CYLINDER,
            scale=Vector3(math.sqrt(values[0]), math.sqrt(values[1]), 0.001),
        )

    def set_scale(self, scale: float) -> None:
        self.template = replace(self.template, scale=Vector3(scale, scale, scale))

    def set_color(self, r: float, g: float, b: float, a: float = 1.0) -> None:
        self.template = replace(self.template, color=Color(r, g, b, a))

    def set_time(self, stamp: float) -> None:
        self.template = replace(self.template, header=replace(self.template.header, stamp=stamp))

    def send_and_reset_data(self) -> None:
        """Publish the collected markers, then start a fresh batch."""
        self._publish(list(self.markers))
        self.markers.clear()
        self.id_counter = 0


@dataclass(frozen=True)
class IterData:
    """Per-iteration scan-matching diagnostics."""

    hessian: Tuple[float, ...]
    determinant: float
    condition_num: float
    determinant2d: float
    condition_num2d: float


class DebugInfoProvider:
    """Collects Hessian diagnostics and hands them to a publisher in batches."""

    def __init__(self, publish: Optional[Callable[[List[IterData]], None]] = None) -> None:
        self._publish = publish or _ignore
        self.iter_data: List[IterData] = []

    def add_hessian_matrix(self, hessian: Sequence[Sequence[float]]) -> IterData:
        """Record determinant and condition numbers of a 3x3 Hessian."""
        h = np.asarray(hessian, dtype=float)
        if h.shape != (3, 3):
            raise ValueError(f"hessian must be 3x3, got shape {h.shape}")
        block = h[:2, :2]
        values = np.linalg.eigvalsh(h)
        values2d = np.linalg.eigvalsh(block)
        with np.errstate(divide="ignore", invalid="ignore"):
            cond = float(np.float64(values[2]) / np.float64(values[0]))
            cond2d = float(np.float64(values2d[1]) / np.float64(values2d[0]))
        data = IterData(
            hessian=tuple(float(v) for v in h.flatten(order="F")),
            determinant=float(np.linalg.det(h)),
            condition_num=cond,
            determinant2d=float(np.linalg.det(block)),
            condition_num2d=cond2d,
        )
        self.iter_data.append(data)
        return data

    def add_pose_likelihood(self, likelihood: float) -> None:
        """Accept a pose likelihood; likelihoods are not part of the debug record."""
        float(likelihood)

    def send_and_reset_data(self) -> None:
        self._publish(list(self.iter_data))
        self.iter_data.clear()