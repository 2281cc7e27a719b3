"""Parsing of written type expressions such as ``Vec<Option<T>>`` into references."""

from __future__ import annotations

from .types import TypeReference


def _is_blank(text: str) -> bool:
    return not text or text.isspace()


def parse_type_reference(text: str) -> TypeReference:
    """Split a type expression into its name and generic arguments.

    Arguments are separated by commas at the first nesting level and parsed
    recursively. Empty argument slots are ignored, as is anything after the
    closing bracket. The parse is deliberately naive: it only tracks angle
    brackets and commas.
    """
    name = text
    arguments: list[TypeReference] = []
    depth = 0
    start = 0

    def take_argument(end: int) -> None:
        segment = text[start:end]
        if not _is_blank(segment):
            arguments.append(parse_type_reference(segment))

    for position, char in enumerate(text):
        if char == "<":
            if depth == 0:
                name = text[start:position]
                start = position + 1
            depth += 1
        elif char == ">":
            depth -= 1
            if depth == 0:
                take_argument(position)
                start = position + 1
        elif char == "," and depth == 1:
            take_argument(position)
            start = position + 1

    return TypeReference(name.strip(), arguments)