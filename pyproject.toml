[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "megatrom"
version = "0.1.0"
description = "A simulated magnetic disk that stores CSV relations in sector files grouped into blocks"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "storage", "disk", "simulation", "sectors", "blocks", "csv"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
megatrom = "megatrom.menu:main"

[tool.hatch.build.targets.wheel]
packages = ["megatrom"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
