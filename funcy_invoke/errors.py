"""
Error classes for funcy_invoke.

Every engine-level failure is a FuncyError subclass and is raised as an
exception. The one exception to that rule is BusinessError: when a registered
function reports its own failure through a trailing error return, the engine
wraps it in BusinessError and hands it back inside the InvocationResult,
alongside any values that preceded it.

Taxonomy:
- NotFoundError: function or type name has no registry entry
- ArityMismatchError: supplied argument count != declared parameter count
- InvalidArgumentError: malformed argument or request (e.g. non-map for a record)
- StructReconstructionError: UnknownFieldError / ImmutableFieldError /
  FieldTypeConversionError, each naming the offending field
- TypeConversionError: no defined conversion for a positional argument
- InvocationError: the call mechanism rejected the prepared argument list
- BusinessError: the function's own trailing error return was non-null
"""


class FuncyError(Exception):
    """Base exception for funcy_invoke."""
    pass


class ConfigError(FuncyError):
    """Configuration loading or validation error."""
    pass


class InvalidSignatureError(FuncyError):
    """A callable's signature cannot be addressed by a positional call."""
    pass


class NotFoundError(FuncyError):
    """
    A requested name has no registry entry.

    Attributes:
        name: The name that was looked up
    """

    def __init__(self, message: str, name: str):
        super().__init__(message)
        self.name = name


class FunctionNotFoundError(NotFoundError):
    """No function is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"function {name} not found", name)


class TypeNotFoundError(NotFoundError):
    """No structured type is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"type {name} not found", name)


class ArityMismatchError(FuncyError):
    """Supplied argument count does not match the declared parameter count."""

    def __init__(self, function: str, expected: int, supplied: int):
        super().__init__(
            f"function {function} expects {expected} argument(s), got {supplied}"
        )
        self.function = function
        self.expected = expected
        self.supplied = supplied


class InvalidArgumentError(FuncyError):
    """An argument or request has a shape the engine cannot accept."""
    pass


class StructReconstructionError(InvalidArgumentError):
    """
    Base for failures while rebuilding a record from a field map.

    Attributes:
        field: Dotted path of the offending field (e.g. "Inner.ID")
    """

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


class UnknownFieldError(StructReconstructionError):
    """The input map names a field the target record does not declare."""

    def __init__(self, field: str, struct: str):
        super().__init__(f"no such field: {field} in struct {struct}", field)
        self.struct = struct


class ImmutableFieldError(StructReconstructionError):
    """The field exists but cannot be written (private or init=False)."""

    def __init__(self, field: str):
        super().__init__(f"cannot set field {field}", field)


class FieldTypeConversionError(StructReconstructionError):
    """The mapped value has no defined conversion to the field's type."""

    def __init__(self, field: str, source_type: str, target_type: str):
        super().__init__(
            f"cannot convert {source_type} to {target_type} for field {field}",
            field,
        )
        self.source_type = source_type
        self.target_type = target_type


class TypeConversionError(FuncyError):
    """
    A positional argument has no defined conversion to its declared type.

    Attributes:
        position: 1-based argument position
        source_type: Name of the supplied value's type
        target_type: Name of the declared parameter type
    """

    def __init__(self, position: int, source_type: str, target_type: str):
        super().__init__(
            f"cannot convert parameter {position} from {source_type} to {target_type}"
        )
        self.position = position
        self.source_type = source_type
        self.target_type = target_type


class InvocationError(FuncyError):
    """The underlying call mechanism rejected the prepared arguments."""
    pass


class BusinessError(FuncyError):
    """
    A registered function reported its own failure.

    The message is the message of the function's error value, so callers see
    exactly what the function said. The original exception is kept on
    ``original`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, original: BaseException | None = None):
        super().__init__(message)
        self.original = original
        self.__cause__ = original

    @classmethod
    def from_exception(cls, exc: BaseException) -> "BusinessError":
        """Wrap an error value returned by a registered function."""
        if isinstance(exc, BusinessError):
            return exc
        return cls(str(exc) or type(exc).__name__, original=exc)
