"""pytest integration

The ``modstub`` fixture installs the stub finder and removes every stub at
the end of the test:

    def test_clock(modstub):
        modstub.stub("myapp.clock", named={"now": lambda: 0})
        from myapp.report import build  # imports myapp.clock.now
        assert build().timestamp == 0
"""

import logging

import pytest

from .api import get_context
from .settings import get_settings


def pytest_configure(config):
    if get_settings().debug:
        logging.getLogger("modstub").setLevel(logging.DEBUG)


@pytest.fixture
def modstub():
    """Yields the process-wide stub context, reset after the test"""
    context = get_context()
    context.install()

    yield context

    context.reset()
