[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "townmesh"
version = "0.1.0"
description = "Mesh data, OBJ/MTL loading, road tile geometry and event types for a grid-based town builder"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["mesh", "geometry", "obj", "mtl", "tangent space", "road", "texture atlas"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["townmesh"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
