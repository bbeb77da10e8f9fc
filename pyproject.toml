[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mmoclient"
version = "0.1.0"
description = "Tile-based MMORPG client: binary packet protocol, stream framing, map tools and pygame scenes"
requires-python = ">=3.10"
keywords = ["mmorpg", "game", "client", "pygame", "protocol", "tilemap"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Games/Entertainment :: Role-Playing",
    "Topic :: Software Development :: Libraries :: pygame",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
mmoclient = "mmoclient.game:main"
mmoclient-export-map = "mmoclient.mapfile:main"

[tool.hatch.build.targets.wheel]
packages = ["mmoclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
