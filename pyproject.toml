[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minirel"
version = "0.1.0"
description = "A small teaching storage engine: paged database files, a clock buffer pool, catalog records and join helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "database",
    "storage engine",
    "buffer pool",
    "paged file",
    "relational",
    "education",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minirel-destroy = "minirel.dbtools:main"
minirel-testdata = "minirel.testdata:main"

[tool.hatch.build.targets.wheel]
packages = ["minirel"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
