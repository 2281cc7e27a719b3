"""Schema type definitions: references, parameters, fields, structs, enums and primitives."""

from __future__ import annotations

import copy
import enum
import re
from abc import ABC
from dataclasses import dataclass, field, replace
from typing import Any, Callable, ClassVar, Optional, Protocol

_UINT_RE = re.compile(r"\+?[0-9]+")

TransformCallback = Callable[["TypeReference", Any], None]


def _parses_as_uint(text: str, bits: int = 64) -> bool:
    """True if ``text`` is an unsigned integer that fits into ``bits`` bits."""
    return bool(_UINT_RE.fullmatch(text)) and int(text) < (1 << bits)


def _require(data: dict, key: str, owner: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"{owner}: missing field `{key}`") from None


class _TypeLookup(Protocol):
    def get_type(self, name: str) -> Optional["TypeDef"]: ...


@dataclass
class RustTypeCodegenConfig:
    """Code generation settings specific to the Rust target."""

    additional_derives: set[str] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {"additional_derives": sorted(self.additional_derives)}

    @classmethod
    def from_dict(cls, data: dict) -> "RustTypeCodegenConfig":
        derives = _require(data, "additional_derives", "RustTypeCodegenConfig")
        return cls(set(derives))


@dataclass
class LanguageSpecificTypeCodegenConfig:
    """Per-language code generation settings attached to a type."""

    rust: RustTypeCodegenConfig = field(default_factory=RustTypeCodegenConfig)

    def is_default(self) -> bool:
        return self == LanguageSpecificTypeCodegenConfig()

    def to_dict(self) -> dict:
        return {"rust": self.rust.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> "LanguageSpecificTypeCodegenConfig":
        rust = _require(data, "rust", "LanguageSpecificTypeCodegenConfig")
        return cls(RustTypeCodegenConfig.from_dict(rust))


@dataclass(order=True)
class TypeReference:
    """A reference to a named type, with type arguments for its parameters."""

    name: str
    arguments: list[TypeReference] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.arguments = [
            arg if isinstance(arg, TypeReference) else TypeReference(arg)
            for arg in self.arguments
        ]

    def __hash__(self) -> int:
        return hash((self.name, tuple(self.arguments)))

    def fallback_once(self, typespace: _TypeLookup) -> Optional[TypeReference]:
        """The fallback of this reference one step down, if its type has one."""
        type_def = typespace.get_type(self.name)
        if not isinstance(type_def, Primitive):
            return None
        return type_def.fallback_for(self)

    def fallback_recursively(self, typespace: _TypeLookup) -> None:
        """Replace this reference in place by its last fallback."""
        while (fallback := self.fallback_once(typespace)) is not None:
            self.name = fallback.name
            self.arguments = fallback.arguments

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name}
        if self.arguments:
            data["arguments"] = [arg.to_dict() for arg in self.arguments]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TypeReference":
        name = _require(data, "name", "TypeReference")
        return cls(name, [cls.from_dict(arg) for arg in data.get("arguments", [])])


@dataclass(eq=False)
class TypeParameter:
    """A generic parameter of a type; compared by name only."""

    name: str
    description: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeParameter):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def to_dict(self) -> dict:
        data = {"name": self.name}
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TypeParameter":
        return cls(_require(data, "name", "TypeParameter"), data.get("description", ""))


class FieldsKind(enum.Enum):
    NAMED = "named"
    UNNAMED = "unnamed"
    NONE = "none"


@dataclass
class Fields:
    """The fields of a struct or variant: named, positional, or none (unit)."""

    kind: FieldsKind = FieldsKind.NONE
    items: list[Field] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.kind is FieldsKind.NONE and self.items:
            raise ValueError("unit fields cannot hold any field")

    @classmethod
    def named(cls, fields) -> "Fields":
        return cls(FieldsKind.NAMED, list(fields))

    @classmethod
    def unnamed(cls, fields) -> "Fields":
        return cls(FieldsKind.UNNAMED, list(fields))

    @classmethod
    def none(cls) -> "Fields":
        return cls(FieldsKind.NONE, [])

    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> "Field":
        return self.items[index]

    def to_dict(self) -> Any:
        """Serialized form: ``"none"`` for unit, else ``{kind: [fields]}``."""
        if self.kind is FieldsKind.NONE:
            return FieldsKind.NONE.value
        return {self.kind.value: [f.to_dict() for f in self.items]}

    @classmethod
    def from_dict(cls, data: Any) -> "Fields":
        if data == FieldsKind.NONE.value:
            return cls.none()
        if isinstance(data, dict) and len(data) == 1:
            ((key, value),) = data.items()
            try:
                kind = FieldsKind(key)
            except ValueError:
                raise ValueError(f"unknown fields kind: {key!r}") from None
            if kind is FieldsKind.NONE:
                if value is not None:
                    raise ValueError("unit fields cannot hold any field")
                return cls.none()
            return cls(kind, [Field.from_dict(item) for item in value])
        raise ValueError(f"invalid fields: {data!r}")


@dataclass
class Field:
    """A field of a struct or variant."""

    name: str
    type_ref: TypeReference
    serde_name: str = ""
    description: str = ""
    deprecation_note: Optional[str] = None
    required: bool = False
    flattened: bool = False
    transform_callback: str = ""
    transform_callback_fn: Optional[TransformCallback] = None

    def with_required(self, required: bool) -> "Field":
        return replace(self, required=required)

    def is_named(self) -> bool:
        return not self.is_unnamed()

    def is_unnamed(self) -> bool:
        return _parses_as_uint(self.name)

    def serialized_name(self) -> str:
        return self.serde_name or self.name

    def deprecated(self) -> bool:
        return self.deprecation_note is not None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name}
        if self.serde_name:
            data["serde_name"] = self.serde_name
        if self.description:
            data["description"] = self.description
        if self.deprecation_note is not None:
            data["deprecation_note"] = self.deprecation_note
        data["type"] = self.type_ref.to_dict()
        if self.required:
            data["required"] = True
        if self.flattened:
            data["flattened"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Field":
        return cls(
            name=_require(data, "name", "Field"),
            type_ref=TypeReference.from_dict(_require(data, "type", "Field")),
            serde_name=data.get("serde_name", ""),
            description=data.get("description", ""),
            deprecation_note=data.get("deprecation_note"),
            required=bool(data.get("required", False)),
            flattened=bool(data.get("flattened", False)),
        )


class RepresentationKind(enum.Enum):
    EXTERNAL = "external"
    INTERNAL = "internal"
    ADJACENT = "adjacent"
    NONE = "none"


@dataclass(frozen=True)
class Representation:
    """How an enum is tagged when serialized."""

    kind: RepresentationKind = RepresentationKind.EXTERNAL
    tag: str = ""
    content: str = ""

    @classmethod
    def external(cls) -> "Representation":
        return cls(RepresentationKind.EXTERNAL)

    @classmethod
    def internal(cls, tag: str) -> "Representation":
        return cls(RepresentationKind.INTERNAL, tag=tag)

    @classmethod
    def adjacent(cls, tag: str, content: str) -> "Representation":
        return cls(RepresentationKind.ADJACENT, tag=tag, content=content)

    @classmethod
    def none(cls) -> "Representation":
        return cls(RepresentationKind.NONE)

    def is_default(self) -> bool:
        return self.kind is RepresentationKind.EXTERNAL

    def to_dict(self) -> Any:
        """Serialized form: a bare string for untagged kinds, else a one-key dict."""
        if self.kind is RepresentationKind.INTERNAL:
            return {self.kind.value: {"tag": self.tag}}
        if self.kind is RepresentationKind.ADJACENT:
            return {self.kind.value: {"tag": self.tag, "content": self.content}}
        return self.kind.value

    @classmethod
    def from_dict(cls, data: Any) -> "Representation":
        if isinstance(data, str):
            if data == RepresentationKind.EXTERNAL.value:
                return cls.external()
            if data == RepresentationKind.NONE.value:
                return cls.none()
            raise ValueError(f"invalid representation: {data!r}")
        if isinstance(data, dict) and len(data) == 1:
            ((key, value),) = data.items()
            if key == RepresentationKind.INTERNAL.value:
                return cls.internal(_require(value, "tag", "Representation"))
            if key == RepresentationKind.ADJACENT.value:
                return cls.adjacent(
                    _require(value, "tag", "Representation"),
                    _require(value, "content", "Representation"),
                )
        raise ValueError(f"invalid representation: {data!r}")


class TypeDef(ABC):
    """Common base of primitive, struct and enum type definitions."""

    kind: ClassVar[str]
    name: str
    description: str
    parameters: list[TypeParameter]

    def serialized_name(self) -> str:
        return self.name

    def to_dict(self) -> dict:
        return {"kind": self.kind, "name": self.name}


@dataclass
class Primitive(TypeDef):
    """A type known to target languages, optionally with a fallback type."""

    kind = "primitive"

    name: str
    description: str = ""
    parameters: list[TypeParameter] = field(default_factory=list)
    fallback: Optional[TypeReference] = None

    def fallback_for(self, origin: TypeReference) -> Optional[TypeReference]:
        """Map a reference to this type onto its fallback, carrying arguments over."""
        fallback = self.fallback
        if fallback is None:
            return None
        names = [p.name for p in self.parameters]

        if fallback.name in names:
            index = names.index(fallback.name)
            if index >= len(origin.arguments):
                return None
            chosen = origin.arguments[index]
            return TypeReference(chosen.name, copy.deepcopy(chosen.arguments))

        arguments = []
        for fallback_arg in fallback.arguments:
            if fallback_arg.name not in names:
                continue
            index = names.index(fallback_arg.name)
            if index >= len(origin.arguments):
                return None
            arguments.append(copy.deepcopy(origin.arguments[index]))
        return TypeReference(fallback.name, arguments)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.description:
            data["description"] = self.description
        if self.parameters:
            data["parameters"] = [p.to_dict() for p in self.parameters]
        if self.fallback is not None:
            data["fallback"] = self.fallback.to_dict()
        return data


@dataclass
class Struct(TypeDef):
    """A struct type definition."""

    kind = "struct"

    name: str
    serde_name: str = ""
    description: str = ""
    parameters: list[TypeParameter] = field(default_factory=list)
    fields: Fields = field(default_factory=Fields.none)
    transparent: bool = False
    codegen_config: LanguageSpecificTypeCodegenConfig = field(
        default_factory=LanguageSpecificTypeCodegenConfig
    )

    def serialized_name(self) -> str:
        return self.serde_name or self.name

    def is_alias(self) -> bool:
        """One field that is either named ``0`` or transparent."""
        return len(self.fields) == 1 and (self.fields[0].name == "0" or self.transparent)

    def is_unit(self) -> bool:
        if len(self.fields) != 1:
            return False
        first = self.fields[0]
        return (
            first.name == "0"
            and first.type_ref.name == "std::tuple::Tuple0"
            and not first.required
        )

    def is_tuple(self) -> bool:
        return not self.fields.is_empty() and all(
            _parses_as_uint(f.name) for f in self.fields
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.serde_name:
            data["serde_name"] = self.serde_name
        if self.description:
            data["description"] = self.description
        if self.parameters:
            data["parameters"] = [p.to_dict() for p in self.parameters]
        data["fields"] = self.fields.to_dict()
        if self.transparent:
            data["transparent"] = True
        if not self.codegen_config.is_default():
            data["codegen_config"] = self.codegen_config.to_dict()
        return data


@dataclass
class Variant:
    """A variant of an enum."""

    name: str
    serde_name: str = ""
    description: str = ""
    fields: Fields = field(default_factory=Fields.none)
    discriminant: Optional[int] = None
    untagged: bool = False

    def serialized_name(self) -> str:
        return self.serde_name or self.name

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name}
        if self.serde_name:
            data["serde_name"] = self.serde_name
        if self.description:
            data["description"] = self.description
        data["fields"] = self.fields.to_dict()
        if self.discriminant is not None:
            data["discriminant"] = self.discriminant
        if self.untagged:
            data["untagged"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Variant":
        return cls(
            name=_require(data, "name", "Variant"),
            serde_name=data.get("serde_name", ""),
            description=data.get("description", ""),
            fields=Fields.from_dict(_require(data, "fields", "Variant")),
            discriminant=data.get("discriminant"),
            untagged=bool(data.get("untagged", False)),
        )


@dataclass
class Enum(TypeDef):
    """An enum type definition."""

    kind = "enum"

    name: str
    serde_name: str = ""
    description: str = ""
    parameters: list[TypeParameter] = field(default_factory=list)
    representation: Representation = field(default_factory=Representation)
    variants: list[Variant] = field(default_factory=list)
    codegen_config: LanguageSpecificTypeCodegenConfig = field(
        default_factory=LanguageSpecificTypeCodegenConfig
    )

    def serialized_name(self) -> str:
        return self.serde_name or self.name

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.serde_name:
            data["serde_name"] = self.serde_name
        if self.description:
            data["description"] = self.description
        if self.parameters:
            data["parameters"] = [p.to_dict() for p in self.parameters]
        if not self.representation.is_default():
            data["representation"] = self.representation.to_dict()
        if self.variants:
            data["variants"] = [v.to_dict() for v in self.variants]
        if not self.codegen_config.is_default():
            data["codegen_config"] = self.codegen_config.to_dict()
        return data


def _parameters_from(data: dict) -> list[TypeParameter]:
    return [TypeParameter.from_dict(p) for p in data.get("parameters", [])]


def _codegen_from(data: dict) -> LanguageSpecificTypeCodegenConfig:
    raw = data.get("codegen_config")
    if raw is None:
        return LanguageSpecificTypeCodegenConfig()
    return LanguageSpecificTypeCodegenConfig.from_dict(raw)


def _primitive_from_dict(data: dict) -> Primitive:
    fallback = data.get("fallback")
    return Primitive(
        name=_require(data, "name", "Primitive"),
        description=data.get("description", ""),
        parameters=_parameters_from(data),
        fallback=TypeReference.from_dict(fallback) if fallback is not None else None,
    )


def _struct_from_dict(data: dict) -> Struct:
    return Struct(
        name=_require(data, "name", "Struct"),
        serde_name=data.get("serde_name", ""),
        description=data.get("description", ""),
        parameters=_parameters_from(data),
        fields=Fields.from_dict(_require(data, "fields", "Struct")),
        transparent=bool(data.get("transparent", False)),
        codegen_config=_codegen_from(data),
    )


def _enum_from_dict(data: dict) -> Enum:
    representation = data.get("representation")
    return Enum(
        name=_require(data, "name", "Enum"),
        serde_name=data.get("serde_name", ""),
        description=data.get("description", ""),
        parameters=_parameters_from(data),
        representation=(
            Representation.from_dict(representation)
            if representation is not None
            else Representation()
        ),
        variants=[Variant.from_dict(v) for v in data.get("variants", [])],
        codegen_config=_codegen_from(data),
    )


_TYPE_PARSERS: dict[str, Callable[[dict], TypeDef]] = {
    Primitive.kind: _primitive_from_dict,
    Struct.kind: _struct_from_dict,
    Enum.kind: _enum_from_dict,
}


def type_from_dict(data: dict) -> TypeDef:
    """Build a primitive, struct or enum from its serialized form."""
    kind = _require(data, "kind", "type")
    parser = _TYPE_PARSERS.get(kind)
    if parser is None:
        raise ValueError(f"unknown type kind: {kind!r}")
    return parser(data)