"""Actors that the simulation loop delivers events to.

An actor reads the time from a clock the Simulation hands it. Its handler
either reacts at once by returning events, or returns a generator that
yields back-off delays and is resumed after each one.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Union

from herdsim.core.event import Event

if TYPE_CHECKING:
    from collections.abc import Generator

    from herdsim.core.clock import Clock
    from herdsim.core.temporal import Duration, Instant

logger = logging.getLogger(__name__)

SimYield = Union["Duration", float]
"""A pause inside a process: a Duration, or plain seconds."""

SimReturn = list[Event] | Event | None
"""Events a finished process leaves behind for the loop to schedule."""


class Entity(ABC):
    """Named actor bound to a simulation clock.

    ``now`` only works once ``set_clock`` has been called, which Simulation
    does for every entity it is constructed with.
    """

    def __init__(self, name: str):
        self.name = name
        self._clock: Clock | None = None

    def set_clock(self, clock: Clock) -> None:
        self._clock = clock
        logger.debug("[%s] attached to clock", self.name)

    @property
    def now(self) -> Instant:
        """Current reading of the attached clock.

        Raises:
            RuntimeError: If no clock has been attached yet.
        """
        if self._clock is None:
            raise RuntimeError(f"{self.name} has no clock; add it to a Simulation first.")
        return self._clock.now

    @abstractmethod
    def handle_event(
        self, event: Event
    ) -> Union[Generator[SimYield, None, SimReturn], list[Event], Event, None]:
        """React to ``event``: return follow-up events, or a delay-yielding process."""
        raise NotImplementedError
