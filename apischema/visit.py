"""Mutable traversal of schemas, typespaces and type definitions."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from .types import Enum, Field, Primitive, Struct, TypeDef, TypeParameter, TypeReference, Variant


class VisitBreak(Exception):
    """Raised by a visitor to stop a traversal early, carrying a result."""

    def __init__(self, value: Any = None) -> None:
        super().__init__(value)
        self.value = value


class Visitor:
    """Walks a schema and its children, combining the results of each visit.

    Subclasses override the ``visit_*`` methods they care about and call the
    base implementation to keep walking into children. Results are folded
    with ``combine``, starting from ``zero``. Raising :class:`VisitBreak`
    stops the walk; the schema entry points return the carried value.
    """

    def zero(self) -> Any:
        return None

    def combine(self, left: Any, right: Any) -> Any:
        return None

    def _fold(self, items: Iterable[Any], visit: Callable[[Any], Any]) -> Any:
        acc = self.zero()
        for item in items:
            acc = self.combine(acc, visit(item))
        return acc

    def visit_schema_inputs(self, schema: Any) -> Any:
        """Visit the input typespace, then the input side of every function."""
        try:
            types = self.visit_typespace(schema.input_types)
            functions = self._fold(schema.functions, self.visit_function_inputs)
        except VisitBreak as stop:
            return stop.value
        return self.combine(types, functions)

    def visit_schema_outputs(self, schema: Any) -> Any:
        """Visit the output typespace, then the output side of every function."""
        try:
            types = self.visit_typespace(schema.output_types)
            functions = self._fold(schema.functions, self.visit_function_outputs)
        except VisitBreak as stop:
            return stop.value
        return self.combine(types, functions)

    def visit_function_inputs(self, function: Any) -> Any:
        acc = self.zero()
        if function.input_type is not None:
            acc = self.combine(acc, self.visit_type_ref(function.input_type))
        if function.input_headers is not None:
            acc = self.combine(acc, self.visit_type_ref(function.input_headers))
        return acc

    def visit_function_outputs(self, function: Any) -> Any:
        acc = self.zero()
        if function.output_type is not None:
            acc = self.combine(acc, self.visit_type_ref(function.output_type))
        if function.error_type is not None:
            acc = self.combine(acc, self.visit_type_ref(function.error_type))
        return acc

    def visit_typespace(self, typespace: Any) -> Any:
        """Visit every type of a typespace; its name index is rebuilt afterwards."""
        typespace.invalidate()
        try:
            return self._fold(list(typespace), self.visit_type)
        finally:
            typespace.invalidate()

    def visit_type(self, type_def: TypeDef) -> Any:
        if isinstance(type_def, Struct):
            return self.visit_struct(type_def)
        if isinstance(type_def, Enum):
            return self.visit_enum(type_def)
        if isinstance(type_def, Primitive):
            return self.visit_primitive(type_def)
        raise TypeError(f"cannot visit {type(type_def).__name__}")

    def visit_enum(self, enum: Enum) -> Any:
        parameters = self._fold(enum.parameters, self.visit_type_parameter)
        variants = self._fold(enum.variants, self.visit_variant)
        return self.combine(
            self.combine(parameters, variants), self.visit_top_level_name(enum)
        )

    def visit_variant(self, variant: Variant) -> Any:
        return self._fold(variant.fields, self.visit_field)

    def visit_struct(self, struct: Struct) -> Any:
        parameters = self._fold(struct.parameters, self.visit_type_parameter)
        fields = self._fold(struct.fields, self.visit_field)
        return self.combine(
            self.combine(parameters, fields), self.visit_top_level_name(struct)
        )

    def visit_primitive(self, primitive: Primitive) -> Any:
        parameters = self._fold(primitive.parameters, self.visit_type_parameter)
        return self.combine(parameters, self.visit_top_level_name(primitive))

    def visit_type_parameter(self, parameter: TypeParameter) -> Any:
        return self.zero()

    def visit_field(self, field: Field) -> Any:
        return self.visit_type_ref(field.type_ref)

    def visit_type_ref(self, type_ref: TypeReference) -> Any:
        arguments = self._fold(type_ref.arguments, self.visit_type_ref)
        return self.combine(arguments, self.visit_top_level_name(type_ref))

    def visit_top_level_name(self, owner: Any) -> Any:
        """Called for the ``name`` of structs, enums, primitives and type references.

        Implementations may assign a new ``owner.name``.
        """
        return self.zero()


class CountingVisitor(Visitor):
    """A visitor whose results are counts, summed over the walk."""

    def zero(self) -> int:
        return 0

    def combine(self, left: int, right: int) -> int:
        return left + right