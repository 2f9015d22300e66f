"""
Registry - the process-wide catalogue of callable functions and record types.

Maps names to CallableDescriptors and StructDescriptors. One Registry is
constructed explicitly during startup and handed to everything that registers
or invokes; there is no module-level instance.

Concurrency: all operations are safe from multiple threads. Lookups share a
reader/writer lock and run in parallel; registrations take it exclusively.
The last registration under a name wins.

Usage:
    registry = Registry()
    registry.register_type("Data", Data)
    registry.register_function("mypackage.Function3", function3)

    descriptor = registry.get_function("mypackage.Function3")

    @registry.register()
    def greet(name: str) -> str:
        ...
"""

import logging
from typing import Callable, Optional, TypeVar

from funcy_invoke.errors import FunctionNotFoundError, TypeNotFoundError
from funcy_invoke.rwlock import ReadWriteLock
from funcy_invoke.schemas import CallableDescriptor, StructDescriptor, describe_struct

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


class Registry:
    """
    Thread-safe name -> function and name -> record type registry.

    Registration builds the descriptor outside the lock and then swaps it in
    under the write lock, so readers never observe a half-built entry.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._functions: dict[str, CallableDescriptor] = {}
        self._types: dict[str, StructDescriptor] = {}

    def register_function(
        self, name: str, fn: Callable | CallableDescriptor
    ) -> CallableDescriptor:
        """
        Register a function under ``name``, replacing any previous entry.

        Args:
            name: Registry name (e.g. "mypackage.Function1")
            fn: The function, or an already-built CallableDescriptor

        Returns:
            The stored CallableDescriptor

        Raises:
            InvalidSignatureError: If fn cannot be called positionally
        """
        if isinstance(fn, CallableDescriptor):
            descriptor = fn
        else:
            descriptor = CallableDescriptor.from_callable(name, fn)

        with self._lock.write_locked():
            replaced = name in self._functions
            self._functions[name] = descriptor

        if replaced:
            logger.info(f"Replaced function: {name}")
        else:
            logger.debug(
                f"Registered function: {name} "
                f"(params={descriptor.arity}, returns={len(descriptor.returns)})"
            )
        return descriptor

    def register_type(self, name: str, cls: type | StructDescriptor) -> StructDescriptor:
        """
        Register a record (dataclass) type under ``name``.

        Parameters annotated with the string ``name`` resolve to this type
        when a call is served.

        Raises:
            InvalidArgumentError: If cls is not a dataclass
        """
        if isinstance(cls, StructDescriptor):
            descriptor = cls
        else:
            descriptor = describe_struct(cls)

        with self._lock.write_locked():
            self._types[name] = descriptor

        logger.debug(f"Registered type: {name} ({len(descriptor.fields)} fields)")
        return descriptor

    def get_function(self, name: str) -> CallableDescriptor:
        """
        Look up a function.

        Raises:
            FunctionNotFoundError: If nothing is registered under name
        """
        with self._lock.read_locked():
            descriptor = self._functions.get(name)
        if descriptor is None:
            raise FunctionNotFoundError(name)
        return descriptor

    def get_type(self, name: str) -> StructDescriptor:
        """
        Look up a record type.

        Raises:
            TypeNotFoundError: If nothing is registered under name
        """
        with self._lock.read_locked():
            descriptor = self._types.get(name)
        if descriptor is None:
            raise TypeNotFoundError(name)
        return descriptor

    def has_function(self, name: str) -> bool:
        with self._lock.read_locked():
            return name in self._functions

    def list_functions(self) -> list[str]:
        """Sorted names of all registered functions."""
        with self._lock.read_locked():
            return sorted(self._functions)

    def list_types(self) -> list[str]:
        """Sorted names of all registered record types."""
        with self._lock.read_locked():
            return sorted(self._types)

    def register(self, name: Optional[str] = None) -> Callable[[F], F]:
        """
        Decorator form of register_function.

        The name defaults to ``<module>.<qualname>`` of the decorated function.
        """
        def decorator(fn: F) -> F:
            self.register_function(name or f"{fn.__module__}.{fn.__qualname__}", fn)
            return fn
        return decorator

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._functions)

    def __repr__(self) -> str:
        with self._lock.read_locked():
            return f"Registry(functions={len(self._functions)}, types={len(self._types)})"
