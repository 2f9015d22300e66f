"""
CallableDescriptor - a registered function with its declared signature.

Built once per registration. It wraps the function together with:
- the ordered parameter types (ParamSpec)
- the ordered return slots (TypeSpec); ``-> tuple[A, B, C]`` declares three
  slots, ``-> None`` declares none, anything else declares one
- a call trampoline that binds a positional argument list to the function

The engine dispatches purely through these fields.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from funcy_invoke.errors import InvalidSignatureError, InvocationError
from funcy_invoke.schemas.types import ANY, TypeSpec, build_type_spec, resolve_hints

Trampoline = Callable[[Sequence[Any]], Any]

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class ParamSpec:
    """One positional parameter: its name and declared type."""
    name: str
    type: TypeSpec


@dataclass(frozen=True)
class CallableDescriptor:
    """
    A registered function and its declared signature.

    Attributes:
        name: Registry name
        fn: The function value
        params: Declared positional parameters, in order
        returns: Declared return slots, in order
        multi_return: True when the function returns a tuple of slots
        call: Trampoline invoking fn with a positional argument list
    """
    name: str
    fn: Callable
    params: tuple[ParamSpec, ...]
    returns: tuple[TypeSpec, ...]
    multi_return: bool = False
    call: Trampoline = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.call is None:
            object.__setattr__(self, "call", _make_trampoline(self.name, self.fn))

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def has_trailing_error(self) -> bool:
        """True when the last declared return slot is error-typed."""
        return bool(self.returns) and self.returns[-1].is_error

    @property
    def result_count(self) -> int:
        """Number of ordinary result values a successful call yields."""
        return len(self.returns) - (1 if self.has_trailing_error else 0)

    @classmethod
    def from_callable(cls, name: str, fn: Callable) -> "CallableDescriptor":
        """
        Describe ``fn`` for registration under ``name``.

        Raises:
            InvalidSignatureError: If fn is not callable, has no introspectable
                signature, or takes *args, **kwargs or required keyword-only
                parameters
        """
        if not callable(fn):
            raise InvalidSignatureError(f"{name}: {fn!r} is not callable")
        try:
            sig = inspect.signature(fn)
        except (TypeError, ValueError) as e:
            raise InvalidSignatureError(f"{name}: signature not introspectable: {e}") from e

        hints = resolve_hints(fn)
        params = []
        for p in sig.parameters.values():
            if p.kind in _POSITIONAL:
                annotation = hints.get(p.name, p.annotation)
                if annotation is inspect.Parameter.empty:
                    params.append(ParamSpec(p.name, ANY))
                else:
                    params.append(ParamSpec(p.name, build_type_spec(annotation)))
            elif p.kind == inspect.Parameter.KEYWORD_ONLY and p.default is not p.empty:
                continue
            else:
                raise InvalidSignatureError(
                    f"{name}: parameter '{p.name}' ({p.kind.description}) "
                    f"cannot be supplied positionally"
                )

        returns, multi = _describe_returns(hints.get("return", sig.return_annotation))
        return cls(
            name=name,
            fn=fn,
            params=tuple(params),
            returns=returns,
            multi_return=multi,
        )


def _describe_returns(annotation: Any) -> tuple[tuple[TypeSpec, ...], bool]:
    if annotation is inspect.Signature.empty:
        return (ANY,), False
    if annotation is None or annotation is type(None):
        return (), False

    origin = getattr(annotation, "__origin__", None)
    args = getattr(annotation, "__args__", ())
    if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        if args == ((),):
            return (), True
        return tuple(build_type_spec(a) for a in args), True
    return (build_type_spec(annotation),), False


def _make_trampoline(name: str, fn: Callable) -> Trampoline:
    sig = inspect.signature(fn)

    def trampoline(args: Sequence[Any]) -> Any:
        try:
            bound = sig.bind(*args)
        except TypeError as e:
            raise InvocationError(f"cannot call {name}: {e}") from e
        return fn(*bound.args, **bound.kwargs)

    return trampoline
