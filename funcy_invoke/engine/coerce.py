"""
Argument coercion - generic values to declared parameter types.

Generic values are what ``json.loads`` produces: None, bool, int, float, str,
list and dict. Each positional argument is converted to the TypeSpec declared
at its position:

- record (dataclass) parameters are rebuilt from a field-name -> value map
  (struct reconstruction); any other shape is an InvalidArgumentError
- everything else goes through the primitive conversion table below;
  no defined conversion is a TypeConversionError

Conversion table:
    int      <- int, float with an integral value (bool is rejected)
    float    <- int, float (bool is rejected)
    str      <- str
    bytes    <- bytes, bytearray, str (UTF-8)
    bool     <- bool
    None     <- None
    Optional <- None, or whatever the wrapped type accepts
    list[T]  <- list/tuple, item-wise to T
    dict[T]  <- dict, value-wise to T
    other C  <- instances of C

Struct reconstruction policy:
- driven by the supplied keys; unknown key -> UnknownFieldError
- private / init=False field -> ImmutableFieldError
- unconvertible value -> FieldTypeConversionError
- absent fields keep the dataclass default, else the zero value of their type
  (private fields included; only init=False fields are left to the class)
- nested records given as nested maps are rebuilt recursively
- keys match field names exactly (case-sensitive)
"""

from typing import Any, Callable, Sequence

from funcy_invoke.errors import (
    FieldTypeConversionError,
    ImmutableFieldError,
    InvalidArgumentError,
    TypeConversionError,
    UnknownFieldError,
)
from funcy_invoke.schemas import Kind, StructDescriptor, TypeSpec, describe_struct
from funcy_invoke.schemas.signature import ParamSpec

# Resolves a NAMED type reference to a registered record type
TypeResolver = Callable[[str], StructDescriptor]


class _Mismatch(Exception):
    """Internal signal: value has no conversion to the target spec."""

    def __init__(self, value: Any, target: str):
        super().__init__(f"{type(value).__name__} -> {target}")
        self.source_type = type(value).__name__
        self.target_type = target


def coerce_arguments(
    params: Sequence[ParamSpec],
    args: Sequence[Any],
    resolve: TypeResolver,
) -> list[Any]:
    """
    Coerce every positional argument to its declared parameter type.

    The caller has already checked that ``len(args) == len(params)``.

    Raises:
        InvalidArgumentError: Record parameter given a non-map value
        StructReconstructionError: Field-level failure while rebuilding a record
        TypeConversionError: No defined conversion for an argument
        TypeNotFoundError: A parameter names an unregistered record type
    """
    coerced = []
    for position, (param, value) in enumerate(zip(params, args), start=1):
        coerced.append(coerce_argument(position, param.type, value, resolve))
    return coerced


def coerce_argument(position: int, spec: TypeSpec, value: Any, resolve: TypeResolver) -> Any:
    """Coerce one positional argument (``position`` is 1-based)."""
    descriptor = _record_descriptor(spec, resolve)
    if descriptor is not None:
        if isinstance(value, descriptor.cls):
            return value
        if not isinstance(value, dict):
            raise InvalidArgumentError(
                f"parameter {position} expects a map for record {descriptor.name}, "
                f"got {type(value).__name__}"
            )
        return reconstruct_struct(value, descriptor, resolve)

    try:
        return _convert(value, spec, resolve)
    except _Mismatch as m:
        raise TypeConversionError(position, m.source_type, m.target_type) from None


def reconstruct_struct(
    data: dict[str, Any],
    descriptor: StructDescriptor,
    resolve: TypeResolver,
    path: str = "",
) -> Any:
    """
    Build an instance of ``descriptor.cls`` from a field-name -> value map.

    Args:
        data: Field values keyed by exact field name
        descriptor: Target record type
        resolve: Lookup for NAMED type references
        path: Dotted prefix used when reporting nested fields

    Raises:
        UnknownFieldError, ImmutableFieldError, FieldTypeConversionError
        InvalidArgumentError: If the dataclass constructor rejects the values
    """
    values: dict[str, Any] = {}
    for key, raw in data.items():
        field_path = f"{path}{key}"
        spec = descriptor.field(key) if isinstance(key, str) else None
        if spec is None:
            raise UnknownFieldError(field_path, descriptor.name)
        if not spec.writable:
            raise ImmutableFieldError(field_path)
        values[key] = _convert_field(raw, spec.type, resolve, field_path)

    for spec in descriptor.fields:
        if spec.name in values or not spec.init or spec.has_default:
            continue
        values[spec.name] = zero_value(spec.type, resolve)

    try:
        return descriptor.cls(**values)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"cannot construct {descriptor.name}: {e}") from e


def zero_value(spec: TypeSpec, resolve: TypeResolver) -> Any:
    """Value a record field takes when the input map does not supply it."""
    if spec.kind == Kind.INT:
        return 0
    if spec.kind == Kind.FLOAT:
        return 0.0
    if spec.kind == Kind.STR:
        return ""
    if spec.kind == Kind.BYTES:
        return b""
    if spec.kind == Kind.BOOL:
        return False
    if spec.kind == Kind.LIST:
        return (spec.cls or list)()
    if spec.kind == Kind.DICT:
        return {}
    descriptor = _record_descriptor(spec, resolve)
    if descriptor is not None:
        return reconstruct_struct({}, descriptor, resolve)
    return None


def _record_descriptor(spec: TypeSpec, resolve: TypeResolver) -> StructDescriptor | None:
    if spec.kind == Kind.STRUCT:
        return describe_struct(spec.cls)
    if spec.kind == Kind.NAMED:
        return resolve(spec.name)
    return None


def _convert_field(value: Any, spec: TypeSpec, resolve: TypeResolver, path: str) -> Any:
    descriptor = _record_descriptor(spec, resolve)
    if descriptor is not None:
        if isinstance(value, descriptor.cls):
            return value
        if isinstance(value, dict):
            return reconstruct_struct(value, descriptor, resolve, path=f"{path}.")
        raise FieldTypeConversionError(path, type(value).__name__, spec.name)
    try:
        return _convert(value, spec, resolve)
    except _Mismatch as m:
        raise FieldTypeConversionError(path, m.source_type, m.target_type) from None


def _convert(value: Any, spec: TypeSpec, resolve: TypeResolver) -> Any:
    kind = spec.kind

    if kind == Kind.ANY:
        return value

    if kind == Kind.INT:
        if isinstance(value, bool):
            raise _Mismatch(value, spec.name)
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise _Mismatch(value, spec.name)

    if kind == Kind.FLOAT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                return float(value)
            except OverflowError:
                raise _Mismatch(value, spec.name) from None
        raise _Mismatch(value, spec.name)

    if kind == Kind.STR:
        if isinstance(value, str):
            return value
        raise _Mismatch(value, spec.name)

    if kind == Kind.BYTES:
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode("utf-8")
        raise _Mismatch(value, spec.name)

    if kind == Kind.BOOL:
        if isinstance(value, bool):
            return value
        raise _Mismatch(value, spec.name)

    if kind == Kind.NONE:
        if value is None:
            return None
        raise _Mismatch(value, spec.name)

    if kind == Kind.OPTIONAL:
        if value is None:
            return None
        try:
            return _convert_nested(value, spec.inner, resolve)
        except _Mismatch:
            raise _Mismatch(value, spec.name) from None

    if kind == Kind.UNION:
        for member in spec.members:
            try:
                return _convert_nested(value, member, resolve)
            except _Mismatch:
                continue
        raise _Mismatch(value, spec.name)

    if kind == Kind.LIST:
        if not isinstance(value, (list, tuple)):
            raise _Mismatch(value, spec.name)
        items = [_convert_nested(item, spec.inner, resolve) for item in value]
        return (spec.cls or list)(items)

    if kind == Kind.DICT:
        if not isinstance(value, dict):
            raise _Mismatch(value, spec.name)
        return {k: _convert_nested(v, spec.inner, resolve) for k, v in value.items()}

    # ERROR and OTHER: only instances of the declared class
    if spec.cls is not None and isinstance(value, spec.cls):
        return value
    raise _Mismatch(value, spec.name)


def _convert_nested(value: Any, spec: TypeSpec, resolve: TypeResolver) -> Any:
    """Convert a value nested inside a container, rebuilding records from maps."""
    descriptor = _record_descriptor(spec, resolve)
    if descriptor is None:
        return _convert(value, spec, resolve)
    if isinstance(value, descriptor.cls):
        return value
    if isinstance(value, dict):
        return reconstruct_struct(value, descriptor, resolve)
    raise _Mismatch(value, spec.name)
