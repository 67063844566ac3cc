[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "burcl"
version = "0.1.0"
description = "Lexer and intermediate-representation generator for a small B-like language"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "lexer", "intermediate representation", "b language"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
burcl = "burcl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["burcl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
