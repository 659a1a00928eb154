[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kabut"
version = "0.1.0"
description = "Line editing, readline-style input, kernel ABI types and an ELF flattener for a small RISC-V operating system"
requires-python = ">=3.10"
dependencies = []
keywords = ["readline", "line-editing", "terminal", "kernel", "abi", "elf", "objcopy", "risc-v"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kabut-objcopy = "kabut.objcopy:main"

[tool.hatch.build.targets.wheel]
packages = ["kabut"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
