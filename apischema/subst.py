"""Substitution of type parameters with concrete type arguments."""

from __future__ import annotations

import copy
from dataclasses import replace
from functools import singledispatch
from typing import Iterable

from .types import Enum, Field, Fields, Struct, TypeDef, TypeParameter, TypeReference, Variant

Substitution = dict[str, TypeReference]


def mk_subst(
    parameters: Iterable[TypeParameter], args: Iterable[TypeReference]
) -> Substitution:
    """Map each parameter name to the type argument in the same position."""
    parameters = list(parameters)
    args = list(args)
    if len(parameters) != len(args):
        raise ValueError(
            f"expected {len(parameters)} type arguments, got {len(args)}"
        )
    return {p.name: copy.deepcopy(a) for p, a in zip(parameters, args)}


@singledispatch
def substitute(value, subst: Substitution):
    """Return a copy of ``value`` with type parameters replaced per ``subst``."""
    raise TypeError(f"cannot substitute type parameters in {type(value).__name__}")


@substitute.register(TypeReference)
def _substitute_type_ref(value: TypeReference, subst: Substitution) -> TypeReference:
    target = subst.get(value.name)
    if target is not None:
        if value.arguments:
            raise ValueError("type parameter cannot have type arguments")
        return copy.deepcopy(target)
    return TypeReference(value.name, [substitute(arg, subst) for arg in value.arguments])


@substitute.register(Fields)
def _substitute_fields(value: Fields, subst: Substitution) -> Fields:
    return Fields(value.kind, [substitute(f, subst) for f in value.items])


@substitute.register(Field)
def _substitute_field(value: Field, subst: Substitution) -> Field:
    return replace(value, type_ref=substitute(value.type_ref, subst))


@substitute.register(Variant)
def _substitute_variant(value: Variant, subst: Substitution) -> Variant:
    return replace(value, fields=substitute(value.fields, subst))


def instantiate(type_def: TypeDef, args: Iterable[TypeReference]) -> TypeDef:
    """Return a non-generic copy of a struct or enum with its parameters applied."""
    if isinstance(type_def, Struct):
        subst = mk_subst(type_def.parameters, args)
        return replace(
            type_def,
            parameters=[],
            fields=substitute(type_def.fields, subst),
            codegen_config=copy.deepcopy(type_def.codegen_config),
        )
    if isinstance(type_def, Enum):
        subst = mk_subst(type_def.parameters, args)
        return replace(
            type_def,
            parameters=[],
            variants=[substitute(v, subst) for v in type_def.variants],
            codegen_config=copy.deepcopy(type_def.codegen_config),
        )
    raise TypeError(f"cannot instantiate {type(type_def).__name__}")