"""A complete API description: functions plus their input and output types."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .rename import Glob, Pattern, Renamer
from .subst import mk_subst, substitute
from .types import Struct, TypeDef, TypeReference
from .typespace import Function, Typespace
from .visit import Visitor


def _insert_module(type_name: str, module: str) -> str:
    """Put ``module`` just before the last component of a ``::`` separated name."""
    parts = type_name.split("::")
    parts.insert(len(parts) - 1, module)
    return "::".join(parts)


def _transparent_structs(typespace: Typespace) -> list[Struct]:
    return [
        copy.deepcopy(t)
        for t in typespace
        if isinstance(t, Struct) and t.transparent and len(t.fields) == 1
    ]


class _TransparentFolder(Visitor):
    """Replaces references to a transparent struct with its single field's type."""

    def __init__(self, struct: Struct) -> None:
        if not (struct.transparent and len(struct.fields) == 1):
            raise ValueError("only transparent structs with one field can be folded")
        self.struct = struct
        self.target = struct.fields[0].type_ref

    def visit_type_ref(self, type_ref: TypeReference) -> Any:
        if type_ref.name == self.struct.name:
            subst = mk_subst(self.struct.parameters, type_ref.arguments)
            replacement = substitute(self.target, subst)
            type_ref.name = replacement.name
            type_ref.arguments = replacement.arguments
        return super().visit_type_ref(type_ref)


@dataclass
class Schema:
    """Functions of an API and the typespaces their inputs and outputs use."""

    name: str = ""
    description: str = ""
    functions: list[Function] = field(default_factory=list)
    input_types: Typespace = field(default_factory=Typespace)
    output_types: Typespace = field(default_factory=Typespace)

    def is_input_type(self, name: str) -> bool:
        return self.input_types.has_type(name)

    def is_output_type(self, name: str) -> bool:
        return self.output_types.has_type(name)

    def get_type(self, name: str) -> Optional[TypeDef]:
        """Look a type up among the inputs first, then the outputs."""
        found = self.input_types.get_type(name)
        if found is not None:
            return found
        return self.output_types.get_type(name)

    def extend(self, other: "Schema") -> None:
        """Take over the functions and types of ``other``; name and description stay."""
        self.functions.extend(other.functions)
        self.input_types.extend(other.input_types)
        self.output_types.extend(other.output_types)

    def prepend_path(self, path: str) -> None:
        if not path:
            return
        for function in self.functions:
            function.path = f"{path}{function.path}"

    def consolidate_types(self) -> list[str]:
        """Separate input and output types that share a name but differ.

        Such a type ``m::T`` becomes ``m::input::T`` among the inputs and
        ``m::output::T`` among the outputs. Returns all type names, sorted.
        """
        while True:
            all_names: set[str] = set()
            differing: set[str] = set()
            for input_type in self.input_types:
                all_names.add(input_type.name)
                output_type = self.output_types.get_type(input_type.name)
                if output_type is not None and output_type != input_type:
                    differing.add(input_type.name)
            for output_type in self.output_types:
                all_names.add(output_type.name)
                input_type = self.input_types.get_type(output_type.name)
                if input_type is not None and input_type != output_type:
                    differing.add(output_type.name)

            if not differing:
                return sorted(all_names)

            for type_name in sorted(differing):
                self.rename_input_types(type_name, _insert_module(type_name, "input"))
                self.rename_output_types(type_name, _insert_module(type_name, "output"))

    def rename_types(self, pattern: Pattern, replacer: str) -> int:
        """Rename matching types everywhere; returns the number of names changed."""
        return self.rename_input_types(pattern, replacer) + self.rename_output_types(
            pattern, replacer
        )

    def rename_input_types(self, pattern: Pattern, replacer: str) -> int:
        return Renamer(pattern, replacer).visit_schema_inputs(self)

    def rename_output_types(self, pattern: Pattern, replacer: str) -> int:
        return Renamer(pattern, replacer).visit_schema_outputs(self)

    def glob_rename_types(self, glob: str, replacer: str) -> None:
        """Rename types matching a glob pattern; raises GlobPatternError on a bad pattern."""
        self.rename_types(Glob(glob), replacer)

    def fold_transparent_types(self) -> None:
        """Replace transparent single-field structs by the type of their field."""
        for struct in _transparent_structs(self.input_types):
            self.input_types.remove_type(struct.name)
            _TransparentFolder(struct).visit_schema_inputs(self)

        for struct in _transparent_structs(self.output_types):
            self.output_types.remove_type(struct.name)
            _TransparentFolder(struct).visit_schema_outputs(self)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.functions:
            data["functions"] = [f.to_dict() for f in self.functions]
        if len(self.input_types):
            data["input_types"] = {"types": self.input_types.to_list()}
        if len(self.output_types):
            data["output_types"] = {"types": self.output_types.to_list()}
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Schema":
        if "name" not in data:
            raise ValueError("Schema: missing field `name`")
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            functions=[Function.from_dict(f) for f in data.get("functions", [])],
            input_types=Typespace.from_list(
                data.get("input_types", {}).get("types", [])
            ),
            output_types=Typespace.from_list(
                data.get("output_types", {}).get("types", [])
            ),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "Schema":
        return cls.from_dict(json.loads(text))