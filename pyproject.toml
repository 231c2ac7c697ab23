[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flkr"
version = "0.1.0"
description = "Detect application stacks in repositories and describe them for Nix flakes"
requires-python = ">=3.11"
dependencies = []
keywords = ["nix", "flake", "detection", "build", "stack"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
flkr = "flkr.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["flkr"]

[tool.pytest.ini_options]
addopts = "-ra"
