"""Renaming of type names by exact name, module prefix or glob pattern."""

from __future__ import annotations

import re
from typing import Any, Optional, Union

from .visit import CountingVisitor


class GlobPatternError(ValueError):
    """A glob pattern could not be parsed."""

    def __init__(self, msg: str, pos: int) -> None:
        super().__init__(f"{msg} at position {pos}")
        self.msg = msg
        self.pos = pos


def _strip_module_separators(text: str) -> str:
    while text.endswith("::"):
        text = text[:-2]
    return text


def _translate_class(text: str, start: int) -> tuple[str, int]:
    """Translate ``[...]`` beginning at ``start``; return regex and next index."""
    i = start + 1
    negated = i < len(text) and text[i] == "!"
    if negated:
        i += 1
    # a ']' right after the opening bracket is a literal member
    close = text.find("]", i + 1)
    if i >= len(text) or close == -1:
        raise GlobPatternError("invalid range pattern", start)
    members = text[i:close]
    parts = []
    j = 0
    while j < len(members):
        if j + 2 < len(members) and members[j + 1] == "-":
            parts.append(f"{re.escape(members[j])}-{re.escape(members[j + 2])}")
            j += 3
        else:
            parts.append(re.escape(members[j]))
            j += 1
    body = "".join(parts)
    regex = f"(?!/)[^{body}]" if negated else f"(?!/)[{body}]"
    return regex, close + 1


def _translate_component(component: str, offset: int) -> str:
    star_run = re.search(r"\*{3,}", component)
    if star_run:
        raise GlobPatternError(
            "wildcards are either regular `*` or recursive `**`",
            offset + star_run.start(),
        )
    if "**" in component:
        raise GlobPatternError(
            "recursive wildcards must form a single path component",
            offset + component.index("**"),
        )
    out = []
    i = 0
    while i < len(component):
        char = component[i]
        if char == "*":
            out.append("[^/]*")
            i += 1
        elif char == "?":
            out.append("[^/]")
            i += 1
        elif char == "[":
            regex, i = _translate_class(component, i)
            out.append(regex)
        else:
            out.append(re.escape(char))
            i += 1
    return "".join(out)


def _compile_glob(path_pattern: str) -> re.Pattern:
    components = path_pattern.split("/")
    regex = []
    offset = 0
    for position, component in enumerate(components):
        last = position == len(components) - 1
        if component == "**":
            regex.append(".*" if last else "(?:.*/)?")
        else:
            regex.append(_translate_component(component, offset))
            if not last:
                regex.append("/")
        offset += len(component) + 1
    return re.compile("".join(regex), re.DOTALL)


class Glob:
    """Bulk renamer of modules using a glob pattern over ``::`` separated names."""

    def __init__(self, pattern: str) -> None:
        self._path_pattern = pattern.replace("::", "/")
        self._regex = _compile_glob(self._path_pattern)

    def __str__(self) -> str:
        return self._path_pattern.replace("/", "::")

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Glob):
            return NotImplemented
        return self._path_pattern == other._path_pattern

    def __hash__(self) -> int:
        return hash(self._path_pattern)

    def matches(self, name: str) -> bool:
        """True if the whole ``::`` separated name matches the pattern."""
        return self._regex.fullmatch(name.replace("::", "/")) is not None

    def rename(self, name: str, replacer: str) -> Optional[str]:
        """Move a matching type into module ``replacer``; None if it does not match.

        Names without a module never match.
        """
        components = [c for c in name.replace("::", "/").split("/") if c]
        if not components:
            raise ValueError("name must not be empty")
        if len(components) <= 1:
            return None
        if not self.matches(name):
            return None
        base = components[-1]
        replacer = _strip_module_separators(replacer)
        if not replacer:
            return base
        return f"{replacer}::{base}"


Pattern = Union[str, Glob]


def _rename_by_str(pattern: str, name: str, replacer: str) -> Optional[str]:
    if pattern.endswith("::"):
        if not name.startswith(pattern):
            return None
        rest = name[len(pattern):]
        replacer = _strip_module_separators(replacer)
        if not replacer:
            return rest
        return f"{replacer}::{rest}"
    return replacer if name == pattern else None


def rename(pattern: Pattern, name: str, replacer: str) -> Optional[str]:
    """The new name for ``name`` under ``pattern``, or None if it does not apply.

    A string pattern ending in ``::`` replaces that module prefix; any other
    string pattern replaces an exact type name. A :class:`Glob` moves
    matching types into the ``replacer`` module.
    """
    if isinstance(pattern, Glob):
        return pattern.rename(name, replacer)
    if isinstance(pattern, str):
        return _rename_by_str(pattern, name, replacer)
    raise TypeError(f"unsupported rename pattern: {type(pattern).__name__}")


class Renamer(CountingVisitor):
    """Renames every top-level name matching a pattern; counts the renames."""

    def __init__(self, pattern: Pattern, replacer: str) -> None:
        if not isinstance(pattern, (str, Glob)):
            raise TypeError(f"unsupported rename pattern: {type(pattern).__name__}")
        self.pattern = pattern
        self.replacer = replacer

    def visit_top_level_name(self, owner: Any) -> int:
        new_name = rename(self.pattern, owner.name, self.replacer)
        if new_name is None:
            return 0
        owner.name = new_name
        return 1