from apischema.internal import (
    rebind_generic_parameters,
    replace_specific_type_ref_by_generic,
)
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
from apischema.typespace import Typespace


def test_replace_specific_with_generic():
    resolved = TypeReference(
        "Vec2",
        [TypeReference("Vec", ["u8"]), TypeReference("Vec", ["u16", "u8"])],
    )
    unresolved = TypeReference(
        "Vec",
        [TypeReference("Vec", ["T"]), TypeReference("Vec", ["U", "T"])],
    )
    params = [TypeParameter("T"), TypeParameter("U")]
    replace_specific_type_ref_by_generic(resolved, unresolved, params)
    assert resolved == TypeReference(
        "Vec2",
        [TypeReference("Vec", ["T"]), TypeReference("Vec", ["U", "T"])],
    )


def test_replace_specific_with_generic_more():
    resolved = TypeReference(
        "Vec2",
        [TypeReference("Vec", ["u8"]), TypeReference("Vec", ["u16", "u8"])],
    )
    unresolved = TypeReference(
        "Vec",
        [
            TypeReference("T", []),
            TypeReference("Vec", [TypeReference("U", []), TypeReference("X", [])]),
        ],
    )
    params = [TypeParameter("T"), TypeParameter("U")]
    replace_specific_type_ref_by_generic(resolved, unresolved, params)
    assert resolved == TypeReference(
        "Vec2",
        [TypeReference("T", []), TypeReference("Vec", ["U", "u8"])],
    )


def test_replace_circular_with_generic():
    resolved = TypeReference("GenericStruct", ["A"])
    unresolved = TypeReference(
        "GenericStruct", [TypeReference("GenericStruct", ["u8"])]
    )
    replace_specific_type_ref_by_generic(resolved, unresolved, [TypeParameter("A")])
    assert resolved == TypeReference("GenericStruct", ["A"])


def test_rebind_without_parameters_takes_resolved():
    s = Struct("S", fields=Fields.named([Field("a", TypeReference("Vec", ["u8"]))]))
    remap = {TypeReference("Vec", ["u8"]): TypeReference("std::vec::Vec", ["u8"])}
    rebind_generic_parameters(s, remap, Typespace())
    assert s.fields[0].type_ref == TypeReference("std::vec::Vec", ["u8"])


def test_rebind_with_parameters_keeps_generics():
    s = Struct(
        "S",
        parameters=[TypeParameter("T")],
        fields=Fields.named([Field("a", TypeReference("Vec", ["T"]))]),
    )
    remap = {TypeReference("Vec", ["T"]): TypeReference("std::vec::Vec", ["u8"])}
    rebind_generic_parameters(s, remap, Typespace())
    assert s.fields[0].type_ref == TypeReference("std::vec::Vec", ["T"])


def test_rebind_enum_variants_and_unmapped_fields():
    e = Enum(
        "E",
        variants=[
            Variant(
                "V",
                fields=Fields.unnamed(
                    [Field("0", TypeReference("A")), Field("1", TypeReference("B"))]
                ),
            )
        ],
    )
    rebind_generic_parameters(e, {TypeReference("A"): TypeReference("x::A")}, None)
    refs = [f.type_ref for f in e.variants[0].fields]
    assert refs == [TypeReference("x::A"), TypeReference("B")]


def test_transform_callback_runs_with_typespace():
    seen = []

    def transform(type_ref, typespace):
        seen.append(typespace)
        type_ref.name = "transformed"

    ts = Typespace()
    s = Struct(
        "S",
        fields=Fields.named(
            [Field("a", TypeReference("A"), transform_callback_fn=transform)]
        ),
    )
    rebind_generic_parameters(s, {TypeReference("A"): TypeReference("x::A")}, ts)
    assert s.fields[0].type_ref == TypeReference("transformed")
    assert seen == [ts]


def test_primitive_untouched():
    p = Primitive("P", fallback=TypeReference("A"))
    rebind_generic_parameters(p, {TypeReference("A"): TypeReference("x::A")}, None)
    assert p.fallback == TypeReference("A")