[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "apischema"
version = "0.1.0"
description = "A typed schema model for API definitions: type references, structs, enums, typespaces, renaming and generic substitution."
requires-python = ">=3.10"
dependencies = []
keywords = ["schema", "api", "codegen", "types", "generics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["apischema*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
