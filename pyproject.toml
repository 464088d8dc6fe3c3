[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "anvilkv"
version = "0.2.1"
description = "Building blocks for an embedded key-value store: checksums, Bloom filters, skip lists and hash maps"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "key-value", "skip-list", "bloom-filter", "crc32", "hopscotch", "murmurhash"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["anvilkv"]

[tool.pytest.ini_options]
addopts = "-ra"
