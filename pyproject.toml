[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kannolo"
version = "0.3.1"
description = "Building blocks for nearest neighbour search over dense and sparse vectors: plain quantizers, exact query evaluators, top-k selection, code packing and recall helpers."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "ann",
    "nearest-neighbour",
    "vector-search",
    "quantization",
    "top-k",
    "sparse-vectors",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kannolo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
