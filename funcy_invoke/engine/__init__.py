"""
Dynamic invocation engine for funcy_invoke.

This module provides the engine that:
1. Resolves a function name through the Registry
2. Coerces generic (JSON-decoded) arguments to declared parameter types,
   rebuilding record parameters from field maps
3. Invokes the function and splits off a trailing error return
"""

from funcy_invoke.engine.result import InvocationResult
from funcy_invoke.engine.dispatch import Invoker, classify_results
from funcy_invoke.engine.coerce import coerce_arguments, reconstruct_struct

__all__ = [
    "InvocationResult",
    "Invoker",
    "classify_results",
    "coerce_arguments",
    "reconstruct_struct",
]
