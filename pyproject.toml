[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cloudstore"
version = "0.1.0"
description = "Building blocks for a small file store: stored-file records, compression helpers, base64 and an asynchronous log writing toolkit"
requires-python = ">=3.10"
dependencies = []
keywords = ["storage", "compression", "base64", "logging", "backup"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: System :: Logging",
    "Topic :: System :: Archiving :: Backup",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cloudstore-logbackup = "cloudstore.backup:main"

[tool.hatch.build.targets.wheel]
packages = ["cloudstore"]

[tool.pytest.ini_options]
addopts = "-ra"
