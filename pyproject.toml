[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubecore"
version = "0.1.0"
description = "Core primitives for a block game: local contexts, movement input, slider callbacks, blocks, fluids and data components"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "voxel", "components", "blocks", "fluids"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cubecore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
