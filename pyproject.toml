[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aieharness"
version = "0.1.0"
description = "Software models of streaming vector kernels, their dataflow graphs and host-side test drivers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "testing",
    "dataflow",
    "kernels",
    "bfloat16",
    "normalization",
    "simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["aieharness"]

[tool.hatch.build.targets.sdist]
include = ["aieharness", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
