"""
TypeSpec and StructDescriptor - declared types as immutable descriptors.

Annotations are read once, when a function or record type is registered, and
turned into TypeSpec values. The engine only ever consults these descriptors;
it never inspects annotations while serving a call.

Record types are dataclasses. A record's StructDescriptor is built lazily
and cached per class, so self-referencing records (a tree node holding
Optional[Node]) describe without recursion.
"""

import dataclasses
import functools
import types
import typing
from collections import abc
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from funcy_invoke.errors import InvalidArgumentError


class Kind(str, Enum):
    """Shape of a declared type, as far as coercion is concerned."""
    ANY = "any"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BYTES = "bytes"
    BOOL = "bool"
    NONE = "none"
    OPTIONAL = "optional"
    UNION = "union"
    LIST = "list"
    DICT = "dict"
    STRUCT = "struct"
    NAMED = "named"
    ERROR = "error"
    OTHER = "other"


@dataclass(frozen=True)
class TypeSpec:
    """
    Descriptor for one declared parameter, return or field type.

    Attributes:
        kind: Shape tag driving coercion
        name: Display name used in error messages
        cls: Concrete class for STRUCT, ERROR, OTHER and the LIST container
        inner: Item type for LIST, value type for DICT, wrapped type for OPTIONAL
        members: Alternatives for UNION, tried in declaration order
    """
    kind: Kind
    name: str
    cls: Optional[type] = None
    inner: Optional["TypeSpec"] = None
    members: tuple["TypeSpec", ...] = ()

    @property
    def is_error(self) -> bool:
        """True for an exception type or an Optional exception type."""
        if self.kind == Kind.ERROR:
            return True
        if self.kind == Kind.OPTIONAL and self.inner is not None:
            return self.inner.is_error
        return False

    @property
    def struct(self) -> "StructDescriptor":
        """Descriptor of the record class behind a STRUCT spec."""
        if self.kind != Kind.STRUCT or self.cls is None:
            raise TypeError(f"{self.name} is not a record type")
        return describe_struct(self.cls)


ANY = TypeSpec(Kind.ANY, "any")

_PRIMITIVES = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT,
    str: Kind.STR,
    bytes: Kind.BYTES,
}

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, abc.Sequence, abc.Iterable, abc.Collection)
_MAPPING_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def type_name(tp: Any) -> str:
    """Readable name for an annotation."""
    if tp is None or tp is type(None):
        return "None"
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp.__name__
    return str(tp).replace("typing.", "")


def build_type_spec(tp: Any) -> TypeSpec:
    """
    Turn an annotation into a TypeSpec.

    String annotations (and ForwardRefs) that could not be resolved become
    NAMED specs; they are looked up in the registry's type table at call time.
    Annotations with no coercion meaning (TypeVar, Literal, ...) become ANY.
    """
    if tp is Any or tp is object:
        return ANY
    if tp is None or tp is type(None):
        return TypeSpec(Kind.NONE, "None")
    if isinstance(tp, str):
        return TypeSpec(Kind.NAMED, tp)
    if isinstance(tp, typing.ForwardRef):
        return TypeSpec(Kind.NAMED, tp.__forward_arg__)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Union or origin is types.UnionType:
        non_none = tuple(a for a in args if a is not type(None))
        if len(non_none) < len(args):
            if len(non_none) == 1:
                inner = build_type_spec(non_none[0])
            else:
                inner = _union_spec(non_none)
            return TypeSpec(Kind.OPTIONAL, type_name(tp), inner=inner)
        return _union_spec(non_none)

    if origin is not None:
        if origin in _SEQUENCE_ORIGINS:
            item = build_type_spec(args[0]) if args else ANY
            container = origin if origin in (list, tuple, set, frozenset) else list
            return TypeSpec(Kind.LIST, type_name(tp), cls=container, inner=item)
        if origin in _MAPPING_ORIGINS:
            value = build_type_spec(args[1]) if len(args) == 2 else ANY
            return TypeSpec(Kind.DICT, type_name(tp), cls=dict, inner=value)
        return ANY

    if isinstance(tp, type):
        if tp in _PRIMITIVES:
            return TypeSpec(_PRIMITIVES[tp], tp.__name__, cls=tp)
        if tp in (list, tuple, set, frozenset):
            return TypeSpec(Kind.LIST, tp.__name__, cls=tp, inner=ANY)
        if tp is dict:
            return TypeSpec(Kind.DICT, "dict", cls=dict, inner=ANY)
        if issubclass(tp, BaseException):
            return TypeSpec(Kind.ERROR, tp.__name__, cls=tp)
        if dataclasses.is_dataclass(tp):
            return TypeSpec(Kind.STRUCT, tp.__name__, cls=tp)
        return TypeSpec(Kind.OTHER, tp.__name__, cls=tp)
    return ANY


def _union_spec(args: tuple) -> TypeSpec:
    members = tuple(build_type_spec(a) for a in args)
    if any(m.kind == Kind.ANY for m in members):
        return ANY
    name = " | ".join(m.name for m in members)
    return TypeSpec(Kind.UNION, name, members=members)


def resolve_hints(obj: Any) -> dict[str, Any]:
    """
    Resolve annotations of a function or class.

    Falls back to the raw ``__annotations__`` when a forward reference cannot
    be resolved; unresolved strings then become NAMED specs.
    """
    try:
        return typing.get_type_hints(obj)
    except (NameError, SyntaxError, TypeError):
        return dict(getattr(obj, "__annotations__", {}) or {})


@dataclass(frozen=True)
class FieldSpec:
    """
    One declared field of a record type.

    Attributes:
        name: Field name, matched case-sensitively against map keys
        type: Declared field type
        writable: False for init=False fields and underscore-prefixed fields
        has_default: True when the dataclass supplies a default or factory
        init: False when the dataclass constructor does not take the field
    """
    name: str
    type: TypeSpec
    writable: bool = True
    has_default: bool = False
    init: bool = True


@dataclass(frozen=True)
class StructDescriptor:
    """Named fields of a record type, in declaration order."""
    name: str
    cls: type
    fields: tuple[FieldSpec, ...]

    def field(self, name: str) -> Optional[FieldSpec]:
        """Look up a field by exact name."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@functools.lru_cache(maxsize=None)
def describe_struct(cls: type) -> StructDescriptor:
    """
    Build (once per class) the StructDescriptor for a dataclass.

    Raises:
        InvalidArgumentError: If cls is not a dataclass type
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise InvalidArgumentError(f"{type_name(cls)} is not a record (dataclass) type")

    hints = resolve_hints(cls)
    specs = []
    for f in dataclasses.fields(cls):
        has_default = (
            f.default is not dataclasses.MISSING
            or f.default_factory is not dataclasses.MISSING
        )
        specs.append(FieldSpec(
            name=f.name,
            type=build_type_spec(hints.get(f.name, f.type)),
            writable=f.init and not f.name.startswith("_"),
            has_default=has_default,
            init=f.init,
        ))
    return StructDescriptor(name=cls.__name__, cls=cls, fields=tuple(specs))
