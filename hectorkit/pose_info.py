"""Conversion of a planar SLAM pose estimate into pose messages and a transform."""

from __future__ import annotations

import math

import numpy as np

from hectorkit.geometry import (
    Header,
    Pose,
    PoseStamped,
    PoseWithCovarianceStamped,
    Quaternion,
    Transform,
    Vector3,
)


class PoseInfoContainer:
    """Holds the latest pose estimate in several representations."""

    def __init__(self) -> None:
        self.pose_stamped = PoseStamped()
        self.pose_with_covariance_stamped = PoseWithCovarianceStamped()
        self.tf_transform = Transform.identity()

    def update(self, slam_pose, slam_cov, stamp: float, frame_id: str) -> None:
        """Refresh all representations from an (x, y, yaw) pose and its 3x3 covariance."""
        x, y, yaw = (float(v) for v in slam_pose)
        cov = np.asarray(slam_cov, dtype=float)
        if cov.shape != (3, 3):
            raise ValueError(f"covariance must be 3x3, got shape {cov.shape}")

        header = Header(stamp=stamp, frame_id=frame_id)
        pose = Pose(
            position=Vector3(x, y, 0.0),
            orientation=Quaternion(0.0, 0.0, math.sin(yaw * 0.5), math.cos(yaw * 0.5)),
        )

        covariance = [0.0] * 36
        covariance[0] = float(cov[0, 0])
        covariance[7] = float(cov[1, 1])
        covariance[35] = float(cov[2, 2])
        covariance[1] = covariance[6] = float(cov[0, 1])
        covariance[5] = covariance[30] = float(cov[0, 2])
        covariance[11] = covariance[31] = float(cov[1, 2])

        self.pose_stamped = PoseStamped(header=header, pose=pose)
        self.pose_with_covariance_stamped = PoseWithCovarianceStamped(
            header=header, pose=pose, covariance=tuple(covariance)
        )
        self.tf_transform = Transform(pose.orientation, pose.position)