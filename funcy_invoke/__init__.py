"""
funcy_invoke - invoke registered Python functions by name.

Functions are registered in a Registry together with descriptors of their
declared signatures. The Invoker calls them with loosely-typed (JSON-decoded)
arguments, coercing each argument to its declared type and splitting off a
trailing error return.
"""

__version__ = "0.1.0"


__all__ = ["Registry", "Invoker", "InvocationResult", "InvokeHandler", "load_config"]

from .registry import Registry
from .engine import Invoker, InvocationResult
from .handler import InvokeHandler
from .config import load_config
