[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "samvoice"
version = "0.1.0"
description = "SAM-style speech voice engine with realtime glitch effects, factory presets and a UDP text inbox"
requires-python = ">=3.10"
dependencies = []
keywords = ["speech", "sam", "synthesizer", "audio", "effects", "udp", "presets"]
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
    "Topic :: Multimedia :: Sound/Audio :: Speech",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["samvoice"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
