"""Collections of named type definitions and API function descriptions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from .types import TypeDef, TypeReference, type_from_dict


class SerializationMode(enum.Enum):
    """Content type supported for request and response bodies."""

    JSON = "json"
    MSGPACK = "msgpack"


def _ref_from(data: dict, key: str) -> Optional[TypeReference]:
    raw = data.get(key)
    return TypeReference.from_dict(raw) if raw is not None else None


@dataclass
class Function:
    """An API endpoint: its name, mount path and the types it exchanges."""

    name: str
    path: str = ""
    description: str = ""
    deprecation_note: Optional[str] = None
    input_type: Optional[TypeReference] = None
    input_headers: Optional[TypeReference] = None
    output_type: Optional[TypeReference] = None
    error_type: Optional[TypeReference] = None
    serialization: list[SerializationMode] = field(default_factory=list)
    readonly: bool = False
    tags: set[str] = field(default_factory=set)

    def deprecated(self) -> bool:
        return self.deprecation_note is not None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name, "path": self.path}
        if self.description:
            data["description"] = self.description
        if self.deprecation_note is not None:
            data["deprecation_note"] = self.deprecation_note
        for key in ("input_type", "input_headers", "output_type", "error_type"):
            ref = getattr(self, key)
            if ref is not None:
                data[key] = ref.to_dict()
        if self.serialization:
            data["serialization"] = [mode.value for mode in self.serialization]
        if self.readonly:
            data["readonly"] = True
        if self.tags:
            data["tags"] = sorted(self.tags)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Function":
        for key in ("name", "path"):
            if key not in data:
                raise ValueError(f"Function: missing field `{key}`")
        return cls(
            name=data["name"],
            path=data["path"],
            description=data.get("description", ""),
            deprecation_note=data.get("deprecation_note"),
            input_type=_ref_from(data, "input_type"),
            input_headers=_ref_from(data, "input_headers"),
            output_type=_ref_from(data, "output_type"),
            error_type=_ref_from(data, "error_type"),
            serialization=[SerializationMode(m) for m in data.get("serialization", [])],
            readonly=bool(data.get("readonly", False)),
            tags=set(data.get("tags", [])),
        )


class Typespace:
    """An ordered set of type definitions, looked up by name.

    Names may be reserved before their definition is inserted, so that
    recursive types are only defined once.
    """

    def __init__(self, types: Optional[Iterable[TypeDef]] = None) -> None:
        self._types: list[TypeDef] = list(types or [])
        # name -> position in ``_types``; None marks a reserved name
        self._index: dict[str, Optional[int]] = {}

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[TypeDef]:
        return iter(self._types)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_type(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Typespace):
            return NotImplemented
        return self._types == other._types

    def __repr__(self) -> str:
        entries = ", ".join(f"{t.name!r}: {t!r}" for t in self._types)
        return f"Typespace({{{entries}}})"

    def _build_index(self) -> None:
        self._index = {t.name: i for i, t in enumerate(self._types)}

    def _ensure_index(self) -> None:
        if not self._index and self._types:
            self._build_index()

    def invalidate(self) -> None:
        """Forget the name index; it is rebuilt on the next lookup."""
        self._index.clear()

    def get_type(self, name: str) -> Optional[TypeDef]:
        self._ensure_index()
        index = self._index.get(name)
        if index is None:
            return None
        return self._types[index]

    def reserve_type(self, name: str) -> bool:
        """Reserve ``name``; False if it is already reserved or defined."""
        self._ensure_index()
        if name in self._index:
            return False
        self._index[name] = None
        return True

    def insert_type(self, type_def: TypeDef) -> None:
        """Add a definition unless one of that name is already present."""
        self._ensure_index()
        if self._index.get(type_def.name) is not None:
            return
        self._index[type_def.name] = len(self._types)
        self._types.append(type_def)

    def remove_type(self, name: str) -> Optional[TypeDef]:
        self._ensure_index()
        index = self._index.get(name)
        if index is None:
            return None
        del self._index[name]
        removed = self._types.pop(index)
        for key, position in self._index.items():
            if position is not None and position > index:
                self._index[key] = position - 1
        return removed

    def sort_types(self) -> None:
        self._types.sort(key=lambda t: t.name)
        self._build_index()

    def has_type(self, name: str) -> bool:
        self._ensure_index()
        return name in self._index

    def extend(self, other: Iterable[TypeDef]) -> None:
        """Add every definition of ``other`` whose name is not taken yet."""
        self._ensure_index()
        for type_def in other:
            if self.has_type(type_def.name):
                continue
            self.insert_type(type_def)

    def to_list(self) -> list[dict]:
        return [t.to_dict() for t in self._types]

    @classmethod
    def from_list(cls, data: Iterable[dict]) -> "Typespace":
        return cls(type_from_dict(item) for item in data)