"""
Invoker - dispatch a (name, generic arguments) request to a registered function.

Steps for invoke(name, args):
1. Resolve name via Registry.get_function (FunctionNotFoundError propagates)
2. Check arity against the declared parameter count (ArityMismatchError)
3. Coerce each argument to its declared type (see engine.coerce)
4. Call through the descriptor's trampoline (InvocationError if the prepared
   arguments do not bind)
5. Classify the return value: a trailing Exception value is split off as a
   BusinessError; a trailing error slot holding None is dropped

Error handling contract:
- Engine errors are raised, with no partial results
- Exceptions raised inside the function body propagate unchanged
- Errors the function returns become InvocationResult.error
"""

import logging
from typing import Any, Sequence

from funcy_invoke.engine.coerce import coerce_arguments
from funcy_invoke.engine.result import InvocationResult
from funcy_invoke.errors import ArityMismatchError, BusinessError, InvocationError
from funcy_invoke.registry import Registry
from funcy_invoke.schemas import CallableDescriptor

logger = logging.getLogger(__name__)


class Invoker:
    """
    Dynamic invocation engine bound to one Registry.

    Usage:
        invoker = Invoker(registry)
        result = invoker.invoke("mypackage.Function1", ["abc"])
        if result.ok:
            print(result.values)
    """

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def invoke(self, name: str, args: Sequence[Any] = ()) -> InvocationResult:
        """
        Invoke the function registered under ``name`` with generic arguments.

        Args:
            name: Registry name of the function
            args: Ordered generic values (decoded JSON)

        Returns:
            InvocationResult with the function's values and, if the function
            returned one, its error

        Raises:
            FunctionNotFoundError: If name is not registered
            ArityMismatchError: If len(args) differs from the parameter count
            InvalidArgumentError: If a record parameter is not given a map
            StructReconstructionError: If a record cannot be rebuilt
            TypeConversionError: If an argument cannot be converted
            InvocationError: If the prepared arguments are rejected by the call
        """
        descriptor = self.registry.get_function(name)

        args = list(args)
        if len(args) != descriptor.arity:
            raise ArityMismatchError(name, descriptor.arity, len(args))

        coerced = coerce_arguments(descriptor.params, args, self.registry.get_type)

        logger.debug(f"Invoking {name} with {len(coerced)} argument(s)")
        returned = descriptor.call(coerced)

        result = classify_results(descriptor, returned)
        if result.error is not None:
            logger.info(f"{name} returned error: {result.error}")
        return result

    def call(self, name: str, *args: Any) -> list[Any]:
        """
        Invoke and return the values, raising the function's own error.

        Raises:
            BusinessError: If the function returned an error
            FuncyError: Any engine-level failure (see invoke)
        """
        return self.invoke(name, args).raise_for_error()


def classify_results(descriptor: CallableDescriptor, returned: Any) -> InvocationResult:
    """
    Split a raw return value into result values and an optional error.

    Raises:
        InvocationError: If a multi-slot function did not return a tuple of
            the declared length
    """
    values = _as_values(descriptor, returned)

    if values and isinstance(values[-1], Exception):
        return InvocationResult(
            values=values[:-1],
            error=BusinessError.from_exception(values[-1]),
        )

    if descriptor.has_trailing_error and values and values[-1] is None:
        values = values[:-1]
    return InvocationResult(values=values)


def _as_values(descriptor: CallableDescriptor, returned: Any) -> list[Any]:
    if descriptor.multi_return:
        if not isinstance(returned, tuple) or len(returned) != len(descriptor.returns):
            got = len(returned) if isinstance(returned, tuple) else type(returned).__name__
            raise InvocationError(
                f"{descriptor.name} declares {len(descriptor.returns)} return values, got {got}"
            )
        return list(returned)
    if not descriptor.returns:
        return [] if returned is None else [returned]
    return [returned]
