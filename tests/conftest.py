import logging

import pytest

import sample_functions
from funcy_invoke.engine import Invoker
from funcy_invoke.handler import InvokeHandler
from funcy_invoke.registry import Registry


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path):
    # Never read a developer's real ~/.config/funcy
    home = tmp_path / "funcy_home"
    monkeypatch.setenv("FUNCY_HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def reset_package_logger():
    # CLI commands install handlers; drop them so later tests log cleanly
    yield
    logger = logging.getLogger("funcy_invoke")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def registry():
    reg = Registry()
    sample_functions.register(reg)
    return reg


@pytest.fixture
def invoker(registry):
    return Invoker(registry)


@pytest.fixture
def handler(invoker):
    return InvokeHandler(invoker)
