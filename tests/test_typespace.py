import pytest

from apischema.types import Primitive, Struct, TypeReference
from apischema.typespace import Function, SerializationMode, Typespace


def test_serialization_mode_values():
    assert SerializationMode("json") is SerializationMode.JSON
    assert SerializationMode("msgpack") is SerializationMode.MSGPACK


def test_function_minimal_dict():
    f = Function("users.login")
    assert f.to_dict() == {"name": "users.login", "path": ""}
    assert not f.deprecated()


def test_function_round_trip():
    f = Function(
        "users.login",
        path="/api/v1",
        description="log in",
        deprecation_note="",
        input_type=TypeReference("Req", [TypeReference("u8")]),
        output_type=TypeReference("Resp"),
        error_type=TypeReference("Err"),
        serialization=[SerializationMode.JSON, SerializationMode.MSGPACK],
        readonly=True,
        tags={"b", "a"},
    )
    data = f.to_dict()
    assert data["serialization"] == ["json", "msgpack"]
    assert data["tags"] == ["a", "b"]
    assert "input_headers" not in data
    back = Function.from_dict(data)
    assert back == f
    assert back.deprecated()


def test_function_requires_path():
    with pytest.raises(ValueError):
        Function.from_dict({"name": "x"})


def test_reserve_then_insert():
    ts = Typespace()
    assert ts.reserve_type("a::A")
    assert not ts.reserve_type("a::A")
    assert ts.has_type("a::A")
    assert ts.get_type("a::A") is None
    assert len(ts) == 0
    s = Struct("a::A")
    ts.insert_type(s)
    assert ts.get_type("a::A") is s
    assert len(ts) == 1


def test_insert_keeps_first():
    ts = Typespace()
    first = Struct("A", description="first")
    ts.insert_type(first)
    ts.insert_type(Struct("A", description="second"))
    assert len(ts) == 1
    assert ts.get_type("A") is first


def test_remove_keeps_lookup_consistent():
    a, b, c = Struct("A"), Struct("B"), Primitive("C")
    ts = Typespace([a, b, c])
    assert ts.remove_type("A") is a
    assert ts.remove_type("A") is None
    assert ts.get_type("B") is b
    assert ts.get_type("C") is c
    assert "A" not in ts
    assert list(ts) == [b, c]


def test_remove_reserved_returns_none():
    ts = Typespace()
    ts.reserve_type("R")
    assert ts.remove_type("R") is None
    assert ts.has_type("R")


def test_sort_types():
    ts = Typespace([Struct("b"), Struct("c"), Struct("a")])
    ts.sort_types()
    assert [t.name for t in ts] == ["a", "b", "c"]
    assert ts.get_type("c").name == "c"


def test_extend_skips_existing():
    mine = Struct("A", description="mine")
    ts = Typespace([mine])
    ts.extend(Typespace([Struct("A", description="theirs"), Struct("B")]))
    assert [t.name for t in ts] == ["A", "B"]
    assert ts.get_type("A") is mine


def test_invalidate_rebuilds_after_rename():
    s = Struct("Old")
    ts = Typespace([s])
    assert ts.has_type("Old")
    s.name = "New"
    ts.invalidate()
    assert ts.get_type("New") is s
    assert not ts.has_type("Old")


def test_list_round_trip():
    ts = Typespace(
        [
            Primitive("u8"),
            Struct("S", fields=Struct("S").fields, transparent=True),
        ]
    )
    data = ts.to_list()
    assert [d["kind"] for d in data] == ["primitive", "struct"]
    assert Typespace.from_list(data) == ts