"""Rebinding of parsed field type references to their resolved forms."""

from __future__ import annotations

import copy
from typing import Any, Mapping, Sequence

from .types import Enum, Field, Struct, TypeDef, TypeParameter, TypeReference

Remap = Mapping[TypeReference, TypeReference]


def replace_specific_type_ref_by_generic(
    resolved: TypeReference,
    unresolved: TypeReference,
    parameters: Sequence[TypeParameter],
) -> None:
    """Put generic parameters of ``unresolved`` back into ``resolved``, in place.

    Wherever ``unresolved`` names one of ``parameters``, the matching position
    in ``resolved`` is replaced by that parameter reference.
    """
    if any(p.name == unresolved.name for p in parameters):
        resolved.name = unresolved.name
        resolved.arguments = copy.deepcopy(unresolved.arguments)

    for resolved_arg, unresolved_arg in zip(resolved.arguments, unresolved.arguments):
        replace_specific_type_ref_by_generic(resolved_arg, unresolved_arg, parameters)


def _replace_type_ref(
    target: TypeReference,
    resolved: TypeReference,
    parameters: Sequence[TypeParameter],
) -> None:
    unresolved = copy.deepcopy(target)
    target.name = resolved.name
    target.arguments = copy.deepcopy(resolved.arguments)
    if parameters:
        replace_specific_type_ref_by_generic(target, unresolved, parameters)


def _replace_field(
    field: Field, remap: Remap, typespace: Any, parameters: Sequence[TypeParameter]
) -> None:
    resolved = remap.get(field.type_ref)
    if resolved is not None:
        _replace_type_ref(field.type_ref, resolved, parameters)
    if field.transform_callback_fn is not None:
        field.transform_callback_fn(field.type_ref, typespace)


def rebind_generic_parameters(type_def: TypeDef, remap: Remap, typespace: Any) -> None:
    """Replace field type references of a struct or enum per ``remap``, in place.

    Transform callbacks attached to fields run afterwards with ``typespace``.
    Primitives are left untouched.
    """
    if isinstance(type_def, Struct):
        for field in type_def.fields:
            _replace_field(field, remap, typespace, type_def.parameters)
    elif isinstance(type_def, Enum):
        for variant in type_def.variants:
            for field in variant.fields:
                _replace_field(field, remap, typespace, type_def.parameters)