[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snapdiff"
version = "0.1.0"
description = "A terminal diff tool for comparing restic snapshots."
requires-python = ">=3.10"
dependencies = []
keywords = ["restic", "backup", "snapshot", "diff", "terminal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Backup",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
snapdiff = "snapdiff.app:main"

[tool.hatch.build.targets.wheel]
packages = ["snapdiff"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
