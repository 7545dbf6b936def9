[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chunklife"
version = "0.1.0"
description = "Conway's Game of Life on an endless grid of hashed 16x16 chunks, with a pygame viewer"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game of life", "cellular automaton", "conway", "simulation", "pygame", "xpm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
chunklife = "chunklife.app:main"

[tool.hatch.build.targets.wheel]
packages = ["chunklife"]

[tool.pytest.ini_options]
addopts = "-ra"
