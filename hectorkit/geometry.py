"""Small rigid-body geometry toolkit and the pose message types built on it."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Tuple

Matrix3 = Tuple[Tuple[float, float, float], Tuple[float, float, float], Tuple[float, float, float]]


class TransformError(Exception):
    """Raised when a transform between two frames is not available."""


@dataclass(frozen=True)
class Vector3:
    """A three-dimensional vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3:
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def length(self) -> float:
        """Euclidean norm."""
        return math.sqrt(self.dot(self))

    def dot(self, other: Vector3) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def angle(self, other: Vector3) -> float:
        """Angle in radians between this vector and another."""
        s = math.sqrt(self.dot(self) * other.dot(other))
        if s == 0.0:
            raise ValueError("angle is undefined for a zero-length vector")
        return math.acos(max(-1.0, min(1.0, self.dot(other) / s)))


@dataclass(frozen=True)
class Quaternion:
    """A rotation quaternion (x, y, z, w)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def from_rpy(cls, roll: float, pitch: float, yaw: float) -> Quaternion:
        """Build a quaternion from fixed-axis roll, pitch and yaw angles."""
        cr, sr = math.cos(roll * 0.5), math.sin(roll * 0.5)
        cp, sp = math.cos(pitch * 0.5), math.sin(pitch * 0.5)
        cy, sy = math.cos(yaw * 0.5), math.sin(yaw * 0.5)
        return cls(
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
            cr * cp * cy + sr * sp * sy,
        )

    def __mul__(self, other: Quaternion) -> Quaternion:
        return Quaternion(
            self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            self.w * other.y + self.y * other.w + self.z * other.x - self.x * other.z,
            self.w * other.z + self.z * other.w + self.x * other.y - self.y * other.x,
            self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
        )

    def _length2(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w

    def inverse(self) -> Quaternion:
        """Multiplicative inverse."""
        d = self._length2()
        if d == 0.0:
            raise ValueError("zero quaternion has no inverse")
        return Quaternion(-self.x / d, -self.y / d, -self.z / d, self.w / d)

    def matrix(self) -> Matrix3:
        """Rotation matrix as three rows."""
        d = self._length2()
        if d == 0.0:
            raise ValueError("zero quaternion is not a rotation")
        s = 2.0 / d
        xs, ys, zs = self.x * s, self.y * s, self.z * s
        wx, wy, wz = self.w * xs, self.w * ys, self.w * zs
        xx, xy, xz = self.x * xs, self.x * ys, self.x * zs
        yy, yz, zz = self.y * ys, self.y * zs, self.z * zs
        return (
            (1.0 - (yy + zz), xy - wz, xz + wy),
            (xy + wz, 1.0 - (xx + zz), yz - wx),
            (xz - wy, yz + wx, 1.0 - (xx + yy)),
        )

    def to_rpy(self) -> Tuple[float, float, float]:
        """Return (roll, pitch, yaw) of this rotation."""
        m = self.matrix()
        if abs(m[2][0]) >= 1.0:
            yaw = 0.0
            if m[2][0] < 0.0:
                pitch = math.pi / 2.0
                roll = math.atan2(m[0][1], m[0][2])
            else:
                pitch = -math.pi / 2.0
                roll = math.atan2(-m[0][1], -m[0][2])
            return roll, pitch, yaw
        pitch = -math.asin(m[2][0])
        cp = math.cos(pitch)
        roll = math.atan2(m[2][1] / cp, m[2][2] / cp)
        yaw = math.atan2(m[1][0] / cp, m[0][0] / cp)
        return roll, pitch, yaw

    def yaw(self) -> float:
        """Yaw angle of this rotation."""
        return self.to_rpy()[2]

    def rotate(self, vector: Vector3) -> Vector3:
        """Rotate a vector by this quaternion."""
        m = self.matrix()
        v = tuple(vector)
        return Vector3(*(sum(a * b for a, b in zip(row, v)) for row in m))


@dataclass(frozen=True)
class Transform:
    """A rigid transform: rotation followed by translation."""

    rotation: Quaternion = field(default_factory=Quaternion)
    origin: Vector3 = field(default_factory=Vector3)

    @classmethod
    def identity(cls) -> Transform:
        return cls(Quaternion(), Vector3())

    def apply(self, vector: Vector3) -> Vector3:
        """Transform a point."""
        return self.rotation.rotate(vector) + self.origin

    def compose(self, other: Transform) -> Transform:
        """Return self * other (other applied first)."""
        return Transform(self.rotation * other.rotation, self.apply(other.origin))

    def inverse(self) -> Transform:
        inv = self.rotation.inverse()
        return Transform(inv, -inv.rotate(self.origin))

    def __mul__(self, other):
        if isinstance(other, Transform):
            return self.compose(other)
        if isinstance(other, Vector3):
            return self.apply(other)
        return NotImplemented


@dataclass(frozen=True)
class StampedTransform:
    """A transform between two named frames at a point in time."""

    transform: Transform
    stamp: float
    frame_id: str
    child_frame_id: str


@dataclass(frozen=True)
class Header:
    stamp: float = 0.0
    frame_id: str = ""


@dataclass(frozen=True)
class Pose:
    position: Vector3 = field(default_factory=Vector3)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass(frozen=True)
class PoseStamped:
    header: Header = field(default_factory=Header)
    pose: Pose = field(default_factory=Pose)


@dataclass(frozen=True)
class PoseWithCovarianceStamped:
    header: Header = field(default_factory=Header)
    pose: Pose = field(default_factory=Pose)
    covariance: Tuple[float, ...] = (0.0,) * 36