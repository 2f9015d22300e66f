"""
Registration module loader.

A registration module exposes ``register(registry)`` and adds its functions
and record types to the registry it is given:

    def register(registry):
        registry.register_type("mypackage.Data", Data)
        registry.register_function("mypackage.Function1", function1)

load_modules imports each configured module and calls its register hook,
in order, so later modules can replace earlier registrations.
"""

import importlib
import logging
from typing import Iterable

from funcy_invoke.errors import ConfigError
from funcy_invoke.registry import Registry

logger = logging.getLogger(__name__)


def load_module(registry: Registry, module_name: str) -> None:
    """
    Import one registration module and run its register hook.

    Raises:
        ImportError: If the module cannot be imported
        ConfigError: If the module has no callable ``register``
    """
    module = importlib.import_module(module_name)
    hook = getattr(module, "register", None)
    if not callable(hook):
        raise ConfigError(
            f"Module '{module_name}' has no register(registry) function"
        )

    before = len(registry)
    hook(registry)
    logger.debug(f"Loaded {module_name} ({len(registry) - before} new function(s))")


def load_modules(registry: Registry, module_names: Iterable[str]) -> Registry:
    """Load every module in order and return the registry."""
    for name in module_names:
        load_module(registry, name)
    return registry
