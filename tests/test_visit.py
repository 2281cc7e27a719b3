import copy
from dataclasses import dataclass, field

import pytest

from apischema.types import (
    Enum,
    Field,
    Fields,
    Primitive,
    Struct,
    TypeParameter,
    TypeReference,
    Variant,
)
from apischema.typespace import Function, Typespace
from apischema.visit import CountingVisitor, Visitor, VisitBreak


@dataclass
class _Schema:
    input_types: Typespace = field(default_factory=Typespace)
    output_types: Typespace = field(default_factory=Typespace)
    functions: list = field(default_factory=list)


class _Recorder(CountingVisitor):
    def __init__(self):
        self.names = []
        self.parameters = []

    def visit_type_parameter(self, parameter):
        self.parameters.append(parameter.name)
        return 0

    def visit_top_level_name(self, owner):
        self.names.append(owner.name)
        return 1


class _StopAt(_Recorder):
    def __init__(self, stop_name, value):
        super().__init__()
        self.stop_name = stop_name
        self.value = value

    def visit_top_level_name(self, owner):
        if owner.name == self.stop_name:
            raise VisitBreak(self.value)
        return super().visit_top_level_name(owner)


class _Upper(CountingVisitor):
    def visit_top_level_name(self, owner):
        owner.name = owner.name.upper()
        return 1


def _schema():
    schema = _Schema()
    schema.input_types.insert_type(
        Struct("In", fields=Fields.named([Field("a", TypeReference("u8"))]))
    )
    schema.output_types.insert_type(
        Struct("Out", fields=Fields.named([Field("b", TypeReference("u16"))]))
    )
    schema.functions.append(
        Function(
            "f",
            input_type=TypeReference("In"),
            input_headers=TypeReference("H"),
            output_type=TypeReference("Out"),
            error_type=TypeReference("Err"),
        )
    )
    return schema


def test_struct_visits_parameters_fields_then_name():
    struct = Struct(
        "S",
        parameters=[TypeParameter("T")],
        fields=Fields.named([Field("a", TypeReference("Vec", [TypeReference("u8")]))]),
    )
    recorder = _Recorder()
    count = recorder.visit_struct(struct)
    assert recorder.parameters == ["T"]
    assert recorder.names == ["u8", "Vec", "S"]
    assert count == len(recorder.names)


def test_enum_visits_variant_fields_then_name():
    enum = Enum(
        "E",
        variants=[
            Variant("A", fields=Fields.unnamed([Field("0", TypeReference("i32"))])),
            Variant("B"),
        ],
    )
    recorder = _Recorder()
    count = recorder.visit_type(enum)
    assert recorder.names == ["i32", "E"]
    assert count == len(recorder.names)


def test_primitive_visits_parameters_then_name():
    primitive = Primitive("Map", parameters=[TypeParameter("K"), TypeParameter("V")])
    recorder = _Recorder()
    recorder.visit_type(primitive)
    assert recorder.parameters == ["K", "V"]
    assert recorder.names == ["Map"]


def test_schema_inputs_cover_input_types_and_function_inputs():
    recorder = _Recorder()
    count = recorder.visit_schema_inputs(_schema())
    assert recorder.names == ["u8", "In", "In", "H"]
    assert count == len(recorder.names)


def test_schema_outputs_cover_output_types_and_function_outputs():
    recorder = _Recorder()
    count = recorder.visit_schema_outputs(_schema())
    assert recorder.names == ["u16", "Out", "Out", "Err"]
    assert count == len(recorder.names)


def test_break_stops_schema_walk_and_returns_value():
    visitor = _StopAt("In", 42)
    assert visitor.visit_schema_inputs(_schema()) == 42
    assert visitor.names == ["u8"]


def test_break_propagates_from_nested_visit():
    struct = Struct("S", fields=Fields.named([Field("a", TypeReference("stop"))]))
    visitor = _StopAt("stop", "halted")
    with pytest.raises(VisitBreak) as info:
        visitor.visit_struct(struct)
    assert info.value.value == "halted"
    assert struct.name == "S"


def test_typespace_lookup_follows_renamed_types():
    typespace = Typespace([Struct("foo"), Primitive("bar")])
    assert typespace.get_type("foo") is not None
    count = _Upper().visit_typespace(typespace)
    assert count == 2
    assert typespace.get_type("foo") is None
    assert typespace.get_type("FOO").name == "FOO"
    assert typespace.get_type("BAR").name == "BAR"


def test_default_visitors_change_nothing():
    schema = _schema()
    before = copy.deepcopy(schema)
    assert Visitor().visit_schema_inputs(schema) is None
    assert CountingVisitor().visit_schema_outputs(schema) == 0
    assert schema == before


def test_counting_combine_is_a_monoid():
    visitor = CountingVisitor()
    assert visitor.combine(visitor.zero(), 7) == 7
    assert visitor.combine(2, 3) == visitor.combine(3, 2)


def test_visit_type_rejects_unknown_objects():
    with pytest.raises(TypeError):
        Visitor().visit_type(TypeReference("x"))