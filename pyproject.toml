[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "midnotes"
version = "0.1.0"
description = "Notes library on SQLite with encryption, tags, backlinks, version history, full-text search and encrypted export"
requires-python = ">=3.10"
keywords = ["notes", "encryption", "sqlite", "fts5", "markdown", "backlinks", "knowledge-base"]
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
    "Topic :: Office/Business :: News/Diary",
    "Topic :: Security :: Cryptography",
    "Topic :: Database",
    "Topic :: Text Processing :: Markup :: Markdown",
]
dependencies = [
    "cryptography>=44",
    "pynacl>=1.4",
    "mistune>=3",
    "watchdog",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["midnotes"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
