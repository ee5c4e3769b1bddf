import logging

import pytest

from modstub.api import StubContext, get_context
from modstub.pytest_plugin import modstub  # noqa: F401

from modstub.tests.utils import Package, builtin_module_name


@pytest.fixture
def package(tmp_path, monkeypatch):
    """An importable package with a unique name"""
    root = tmp_path / "site"
    package = Package(root)
    monkeypatch.syspath_prepend(str(root))
    logging.debug("Created package %s in %s", package.name, package.path)

    yield package

    package.unload()


@pytest.fixture
def context():
    """A stub context with its finder installed"""
    context = StubContext()
    context.install()

    yield context

    context.uninstall()


@pytest.fixture
def default_context():
    """The process-wide context, uninstalled after the test"""
    context = get_context()

    yield context

    context.uninstall()


@pytest.fixture
def builtin_name():
    name = builtin_module_name()
    if name is None:
        pytest.skip("No stubbable builtin module in this interpreter")
    return name
