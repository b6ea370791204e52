[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vsesync"
version = "0.1.0"
description = "Environment checks, log-line de-duplication and collection helpers for PTP grand master synchronisation setups"
requires-python = ">=3.10"
dependencies = []
keywords = ["ptp", "gnss", "synchronisation", "validation", "logs", "monitoring"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vsesync"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
