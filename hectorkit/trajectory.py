"""Recording of the robot trajectory and recovery paths out of a given radius."""

from __future__ import annotations

import bisect
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from hectorkit.geometry import Header, Pose, PoseStamped, Quaternion, TransformError, Vector3

logger = logging.getLogger(__name__)

PoseLookup = Callable[[str, PoseStamped], PoseStamped]


@dataclass(frozen=True)
class RecoveryInfo:
    """Result of a recovery query: the path from the radius entry back to the requested pose."""

    req_pose: PoseStamped
    radius_entry_pose: PoseStamped
    header: Header
    trajectory: List[PoseStamped] = field(default_factory=list)


def _ignore(*_: object) -> None:
    pass


class TrajectoryServer:
    """Keeps the time-ordered list of poses of a source frame within a target frame.

    ``lookup_pose(target_frame, pose)`` must return ``pose`` expressed in
    ``target_frame`` or raise :class:`TransformError`.
    """

    def __init__(
        self,
        lookup_pose: PoseLookup,
        *,
        target_frame: str = "map",
        source_frame: str = "base_link",
        update_rate: float = 4.0,
        publish_rate: float = 0.25,
        publish: Optional[Callable[[Header, List[PoseStamped]], None]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if update_rate <= 0 or publish_rate <= 0:
            raise ValueError("update and publish rates must be positive")
        self._lookup_pose = lookup_pose
        self._publish = publish or _ignore
        self._clock = clock
        self.target_frame = target_frame
        self.source_frame = source_frame
        self.update_rate = update_rate
        self.publish_rate = publish_rate
        self.pose_source = PoseStamped(
            header=Header(stamp=0.0, frame_id=source_frame),
            pose=Pose(position=Vector3(), orientation=Quaternion(0.0, 0.0, 0.0, 1.0)),
        )
        self.header = Header(stamp=0.0, frame_id=target_frame)
        self.poses: List[PoseStamped] = []
        self.last_reset_time = clock()

    @property
    def update_period(self) -> float:
        return 1.0 / self.update_rate

    @property
    def publish_period(self) -> float:
        return 1.0 / self.publish_rate

    def sys_cmd_callback(self, command: str) -> None:
        """Clear the trajectory on a "reset" system command."""
        if command == "reset":
            self.last_reset_time = self._clock()
            self.poses.clear()
            self.header = replace(self.header, stamp=self._clock())

    def add_current_pose(self) -> PoseStamped:
        """Look up the latest pose and append it unless its stamp is already stored."""
        pose_out = self._lookup_pose(self.target_frame, self.pose_source)
        if not self.poses or pose_out.header.stamp != self.poses[-1].header.stamp:
            self.poses.append(pose_out)
        self.header = replace(self.header, stamp=pose_out.header.stamp)
        return pose_out

    def update_timer_callback(self) -> bool:
        """Periodic update; returns whether the pose lookup succeeded."""
        try:
            self.add_current_pose()
        except TransformError as exc:
            logger.warning(
                "Trajectory Server: Transform from %s to %s failed: %s",
                self.target_frame,
                self.pose_source.header.frame_id,
                exc,
            )
            return False
        return True

    def publish_timer_callback(self) -> None:
        self._publish(self.header, list(self.poses))

    def get_trajectory(self) -> Tuple[Header, List[PoseStamped]]:
        """The trajectory header and a copy of its poses."""
        return self.header, list(self.poses)

    def recovery_info(self, request_time: float, request_radius: float) -> RecoveryInfo:
        """Find the path leading from outside a radius to the pose at a given time.

        Raises :class:`LookupError` when no such path exists.
        """
        poses = self.poses
        if not poses:
            raise LookupError(
                f"failed to find trajectory leading out of radius {request_radius}"
                " because no poses, i.e. no inverse trajectory, exists"
            )

        it = bisect.bisect_left(poses, request_time, key=lambda p: p.header.stamp)
        if it == len(poses):
            self.add_current_pose()
            it = len(poses) - 1

        it_start = it
        req = poses[it].pose.position
        threshold = request_radius * request_radius
        dist_sqr = 0.0

        while it != 0 and dist_sqr < threshold:
            cur = poses[it].pose.position
            dist_sqr = (req.x - cur.x) ** 2 + (req.y - cur.y) ** 2
            it -= 1

        if dist_sqr < threshold:
            logger.info("Failed to find trajectory leading out of radius %f", request_radius)
            raise LookupError(f"failed to find trajectory leading out of radius {request_radius}")

        it_end = it
        req_pose = poses[it_start]
        return RecoveryInfo(
            req_pose=req_pose,
            radius_entry_pose=poses[it_end],
            header=req_pose.header,
            trajectory=[poses[i] for i in range(it_start, it_end, -1)],
        )