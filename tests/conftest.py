"""
Shared pytest fixtures for herdsim tests.
"""

import logging
import random

import pytest

from herdsim.components.server import CapacityServer
from herdsim.core.clock import Clock
from herdsim.core.temporal import Duration, Instant


@pytest.fixture
def clock() -> Clock:
    """A virtual clock at t=0 that tests advance by hand."""
    return Clock(Instant.Epoch)


@pytest.fixture
def make_server(clock):
    """Factory for servers attached to the shared manual clock."""

    def _make(capacity: int = 5, outage_s: float = 2) -> CapacityServer:
        return CapacityServer(capacity, Duration.from_seconds(outage_s), clock=clock)

    return _make


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture(autouse=True)
def reset_herdsim_logging():
    """Reset logging state before each test.

    Ensures tests start with a clean logging configuration:
    - Removes all handlers except NullHandler
    - Resets level to NOTSET (inherit from parent)
    """
    logger = logging.getLogger("herdsim")

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)

    yield

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
