[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cellsheet"
version = "0.1.0"
description = "A small spreadsheet engine with formulas, cell references and cycle detection"
requires-python = ">=3.10"
dependencies = []
keywords = ["spreadsheet", "formula", "cells", "calculation"]
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
    "Topic :: Office/Business :: Financial :: Spreadsheet",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cellsheet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
