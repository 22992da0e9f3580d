[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taskbase"
version = "0.1.0"
description = "Callbacks, task runners, message loops, thread pools, weak pointers, timing and trace-event records"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "callbacks",
    "task runner",
    "thread pool",
    "message loop",
    "weak pointer",
    "trace events",
]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["taskbase"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
