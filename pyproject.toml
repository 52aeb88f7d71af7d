[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sieger"
version = "0.1.0"
description = "Building blocks for HTTP and FTP load testing: wire readers, FTP control client, request bodies and transaction logs"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "load-testing",
    "benchmark",
    "http",
    "ftp",
    "stress-testing",
    "traffic-generation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: System :: Benchmark",
    "Topic :: Software Development :: Testing :: Traffic Generation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sieger"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
