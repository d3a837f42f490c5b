[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "titusfox"
version = "0.1.0"
description = "Readers for the data files of the Titus the Fox and Moktar platform games: SQZ archives, configuration, sprites, images and tile animation"
requires-python = ">=3.10"
dependencies = []
keywords = ["titus", "moktar", "sqz", "lzw", "huffman", "sprites", "planar", "game-data"]
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
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["titusfox"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
