# apischema

A small library for describing the shape of an API: its functions and the
types they accept and return. The model is plain Python data that can be
inspected, transformed and written out as JSON, so it can feed a code
generator for any target language.

## Install

```
pip install .
pip install ".[test]"   # with pytest for running the tests
```

## The model

- `apischema.types`
  - `TypeReference`: a type name with generic arguments, e.g. `Vec<u8>`.
  - `TypeParameter`: a generic parameter declared on a type (compared by
    name only).
  - `Primitive`, `Struct`, `Enum`: type definitions (all `TypeDef`s).
    Structs and variants hold `Fields` (`Fields.named`, `Fields.unnamed`
    or `Fields.none`) of `Field`s; enums carry a `Representation`
    (`external`, `internal`, `adjacent` or `none`) and a list of
    `Variant`s.
  - `type_from_dict(data)` builds a type definition from its serialized
    form.
- `apischema.typespace`
  - `Typespace`: an ordered collection of type definitions, looked up by
    name. Names can be reserved with `reserve_type` before their
    definition is inserted.
  - `Function`: one API call, with optional input, headers, output and
    error types, a path, `SerializationMode`s, tags and a read-only flag.
- `apischema.schema.Schema`: a name, a description, functions, and
  separate input and output typespaces, with `to_json` / `from_json` and
  `to_dict` / `from_dict`.

## Example

```python
from apischema.types import Struct, Field, Fields, TypeReference
from apischema.typespace import Function
from apischema.schema import Schema

user = Struct(
    name="app::User",
    fields=Fields.named([
        Field("id", TypeReference("u64")).with_required(True),
        Field("email", TypeReference("std::string::String")),
    ]),
)

schema = Schema(name="demo")
schema.input_types.insert_type(user)
login = Function(name="users.login", path="/api/v1")
login.input_type = TypeReference("app::User")
schema.functions.append(login)

schema.prepend_path("/v2")                 # path becomes /v2/api/v1
schema.rename_types("app::", "models")     # app::User -> models::User
print(schema.consolidate_types())          # ['models::User']
print(schema.to_json())
```

## Transformations

- `Schema.consolidate_types()` splits a type whose input and output
  definitions differ into `...::input::Name` and `...::output::Name`, and
  returns the sorted names of all types.
- `Schema.rename_types(pattern, replacer)` renames a single type
  (`"a::B"`) or a whole module (`"a::"`) in the typespaces and in the
  function signatures, and returns how many names were changed.
  `rename_input_types` and `rename_output_types` do the same for one side.
- `Schema.glob_rename_types("a::*", "b")` moves types whose names match a
  glob into module `b`; an invalid pattern raises
  `apischema.rename.GlobPatternError`. It returns nothing.
- `Schema.fold_transparent_types()` replaces every transparent
  single-field struct by its field's type.
- `apischema.subst.instantiate(type_def, args)` applies type arguments to a
  generic struct or enum; `mk_subst` and `substitute` are the pieces it
  is built from.
- `TypeReference.fallback_once` / `fallback_recursively` follow a
  primitive's fallback type, mapping its generic arguments.
- `apischema.internal.rebind_generic_parameters(type_def, remap, typespace)`
  replaces field type references of a struct or enum by resolved ones,
  keeping the type's own generic parameters in place.

## Helpers

- `apischema.typeref.parse_type_reference("Vec<Vec<T>, U>")` parses a
  type expression into a `TypeReference`.
- `apischema.naming.normalize_name(name, ident)` turns a serialized name
  into an identifier-friendly name plus the serialized name to keep.
- `apischema.rename.rename(pattern, name, replacer)` gives the new name a
  string or `Glob` pattern would produce, or `None`.
- `apischema.visit.Visitor` walks a schema and can rewrite it in place;
  subclass it and override the `visit_*` methods you need.
  `CountingVisitor` sums integer results, and raising `VisitBreak` stops
  a walk early.

## What it does not do

The package only holds and transforms the description of an API. It does
not build that description from existing code, it does not generate
client or server code from it, and it does not serve or call any API.
There is no command-line tool.