[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minsql"
version = "0.1.0"
description = "Building blocks for a database node: wire protocol, sharding, MVCC transactions, security, monitoring and streams"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["database", "sharding", "mvcc", "pubsub", "event-sourcing", "rbac"]
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
    "Framework :: AsyncIO",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["minsql"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
