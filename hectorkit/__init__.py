"""Geometry, pose, occupancy-grid, drawing, trajectory, map-server and scan-conversion tools for 2D laser SLAM."""

__version__ = "0.1.0"

__all__ = [
    "drawings",
    "geometry",
    "map_server",
    "map_tools",
    "pose_info",
    "scan_conversion",
    "trajectory",
]