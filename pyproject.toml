[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rtrvsearch"
version = "0.1.0"
description = "In-memory full-text indexing toolkit: documents, inverted index with skip pointers, fuzzy term matching, query caching and binary snapshots"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "search",
    "inverted-index",
    "full-text",
    "skip-pointers",
    "fuzzy-search",
    "damerau-levenshtein",
    "n-gram",
    "lru-cache",
    "information-retrieval",
]
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
    "Topic :: Text Processing :: Indexing",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rtrvsearch"]

[tool.hatch.build.targets.sdist]
include = ["rtrvsearch", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
