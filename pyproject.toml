[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hectorkit"
version = "0.1.0"
description = "Pose bookkeeping, occupancy-grid tools, trajectory recovery and scan conversion for 2D laser SLAM"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["slam", "occupancy-grid", "robotics", "lidar", "trajectory", "ray-casting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hectorkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
