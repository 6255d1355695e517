[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensorfusion"
version = "0.1.0"
description = "Simulated threat world, noisy sensors and a multi-sensor fusion and tracking engine"
requires-python = ">=3.10"
keywords = ["sensor fusion", "simulation", "kalman filter", "clustering", "tracking", "websocket"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]
dependencies = [
    "websockets",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sensorfusion-world = "sensorfusion.world:main"
sensorfusion-worldserver = "sensorfusion.worldserver:main"

[tool.hatch.build.targets.wheel]
packages = ["sensorfusion"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
