[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tvscramble"
version = "0.1.0"
description = "Videocrypt, Videocrypt S, VITC and WSS data encoders for analogue television lines"
requires-python = ">=3.10"
dependencies = []
keywords = ["videocrypt", "vitc", "wss", "vbi", "pal", "analogue-tv", "scrambling", "timecode"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tvscramble"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
