[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inox2d"
version = "0.1.0"
description = "Loader, animator and renderer-agnostic draw dispatcher for Inochi2D puppets (.inp / .inx files)"
requires-python = ">=3.10"
keywords = ["inochi2d", "puppet", "animation", "2d", "rigging", "physics"]
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
    "Topic :: Multimedia :: Graphics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
inox2d-parse-inp = "inox2d.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["inox2d"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 110
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
