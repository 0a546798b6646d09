[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gep"
version = "2.0.0"
description = "Gene Expression Programming: Karva genes, genomes, evolution and code generation from XML grammars"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "gene expression programming",
    "genetic programming",
    "evolutionary computation",
    "karva",
    "symbolic regression",
    "reinforcement learning",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gep"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
