[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "valik"
version = "1.0.0"
description = "Building blocks for distributed local alignment search: database segmentation, probabilistic minimiser thresholds and k-mer prefiltering"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "bioinformatics",
    "sequence",
    "alignment",
    "minimiser",
    "prefilter",
    "fasta",
    "segmentation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["valik"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
