"""Choosing code-friendly names for reflected types, fields and variants."""

from __future__ import annotations

import enum
from typing import Optional


class ReflectType(enum.Enum):
    """Whether a type is reflected as it is read (input) or written (output)."""

    INPUT = "input"
    OUTPUT = "output"


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_invalid(position: int, char: str, has_ident: bool) -> bool:
    if has_ident and position == 0 and not _is_ascii_alpha(char) and char != "_":
        return True
    return not _is_ascii_alnum(char) and char not in "_-"


def normalize_name(name: str, ident: Optional[str]) -> tuple[str, str]:
    """Return ``(code_name, serde_name)`` for a serialized ``name``.

    Code generators handle camel, kebab and snake case, so such names are kept.
    A name holding any other character, or starting with something other than
    a letter or ``_`` when an identifier is given, falls back to ``ident``
    (``"0"`` without one) with ``name`` kept as the serialized name. Kebab case
    names have their dashes turned into underscores, again keeping ``name``
    for serialization. Otherwise the serialized name is empty, meaning it is
    the same as the code name.
    """
    has_ident = ident is not None
    if any(_is_invalid(i, c, has_ident) for i, c in enumerate(name)):
        return (ident if ident is not None else "0", name)

    normalized = name.replace("-", "_")
    if normalized != name:
        return (normalized, name)
    return (name, "")