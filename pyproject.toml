[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "workshop"
version = "0.1.0"
description = "A small personal web workshop: a flashcard JSON API backed by SQLite, a Game of Life page with a pattern file browser, and a static file server."
requires-python = ">=3.10"
dependencies = [
    "werkzeug",
]
keywords = ["flashcards", "game-of-life", "wsgi", "sqlite", "web"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
workshop = "workshop.app:main"

[tool.hatch.build.targets.wheel]
packages = ["workshop"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
