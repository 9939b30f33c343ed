[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dicecore"
version = "0.1.0"
description = "In-memory key-value store core: objects, expiry, reference queues and stacks, a small SQL-like query executor and a RESP codec."
requires-python = ">=3.10"
dependencies = []
keywords = ["key-value", "database", "in-memory", "resp", "redis-protocol", "query"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dicecore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
