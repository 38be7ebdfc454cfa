[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lightscape"
version = "1.0.0a0"
description = "Spatial grid model and effect engine for placing RGB and non-RGB devices in a room and driving lighting effects by position"
requires-python = ">=3.10"
dependencies = []
keywords = ["rgb", "lighting", "effects", "spatial", "grid"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lightscape"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
