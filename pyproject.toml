[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shardctl"
version = "0.1.0"
description = "A static shard controller that assigns key-range shards to key-value servers"
requires-python = ">=3.10"
dependencies = []
keywords = ["sharding", "distributed", "key-value", "shard controller", "configuration"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["shardctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
