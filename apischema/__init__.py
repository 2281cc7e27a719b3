"""Typed schema model for API definitions, with renaming, substitution and JSON I/O."""

__version__ = "0.1.0"

__all__ = [
    "types",
    "subst",
    "typespace",
    "internal",
    "visit",
    "rename",
    "schema",
    "typeref",
    "naming",
]