[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toxicshell"
version = "0.1.0"
description = "Building blocks of a small Unix shell: line normalisation, quoting, variable expansion, an environment with export/unset, builtins and command execution with redirections."
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "command-line", "unix", "builtins", "environment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["toxicshell"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
