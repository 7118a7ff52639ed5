[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clickwire"
version = "0.1.0"
description = "Native TCP protocol client for ClickHouse with typed columnar blocks"
requires-python = ">=3.10"
dependencies = []
keywords = ["clickhouse", "database", "client", "columnar", "native-protocol"]
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
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clickwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
