[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "raycub"
version = "0.1.0"
description = "A small textured raycasting maze explorer driven by .cub scene files"
requires-python = ">=3.10"
keywords = ["raycasting", "game", "maze", "xpm", "pygame", "first-person"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
raycub = "raycub.app:main"

[tool.hatch.build.targets.wheel]
packages = ["raycub"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
