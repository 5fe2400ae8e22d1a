"""Time types for the simulation: points in time and spans between them.

Both types store integer nanoseconds so that arithmetic and comparisons are
exact. The server's per-second accounting depends on that: a request at
9.999999999s must never be counted in second 10.

Instant is a point on the simulation timeline (relative to run start).
Duration is a signed span of time. The arithmetic mirrors the physical
meaning:

    Instant + Duration -> Instant
    Instant - Duration -> Instant
    Instant - Instant  -> Duration
    Duration +/- Duration -> Duration
"""

from __future__ import annotations

from typing import Union

_NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MILLI = 1_000_000


def _seconds_to_nanos(seconds: Union[int, float]) -> int:
    if isinstance(seconds, int):
        return seconds * _NANOS_PER_SECOND
    return int(round(seconds * _NANOS_PER_SECOND))


class Duration:
    """A span of simulated (or wall-clock) time in nanoseconds."""

    __slots__ = ("nanoseconds",)

    ZERO: Duration

    def __init__(self, nanoseconds: int):
        self.nanoseconds = int(nanoseconds)

    @classmethod
    def from_seconds(cls, seconds: Union[int, float]) -> Duration:
        return cls(_seconds_to_nanos(seconds))

    @classmethod
    def from_millis(cls, millis: Union[int, float]) -> Duration:
        if isinstance(millis, int):
            return cls(millis * _NANOS_PER_MILLI)
        return cls(int(round(millis * _NANOS_PER_MILLI)))

    def to_seconds(self) -> float:
        return self.nanoseconds / _NANOS_PER_SECOND

    def to_millis(self) -> float:
        return self.nanoseconds / _NANOS_PER_MILLI

    def whole_seconds(self) -> int:
        """Seconds truncated toward zero, e.g. 9.99s -> 9."""
        if self.nanoseconds < 0:
            return -(-self.nanoseconds // _NANOS_PER_SECOND)
        return self.nanoseconds // _NANOS_PER_SECOND

    def __add__(self, other):
        if isinstance(other, Duration):
            return Duration(self.nanoseconds + other.nanoseconds)
        if isinstance(other, Instant):
            return Instant(self.nanoseconds + other.nanoseconds)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Duration):
            return Duration(self.nanoseconds - other.nanoseconds)
        return NotImplemented

    def __mul__(self, factor):
        if isinstance(factor, int):
            return Duration(self.nanoseconds * factor)
        if isinstance(factor, float):
            return Duration(int(self.nanoseconds * factor))
        return NotImplemented

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds == other.nanoseconds

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds < other.nanoseconds

    def __le__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds <= other.nanoseconds

    def __gt__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds > other.nanoseconds

    def __ge__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds >= other.nanoseconds

    def __hash__(self):
        return hash(("Duration", self.nanoseconds))

    def __repr__(self) -> str:
        return f"Duration({self.to_seconds()}s)"

    def __str__(self) -> str:
        """Human form rounded to milliseconds, e.g. '1.234s' or '250ms'."""
        millis = round(self.nanoseconds / _NANOS_PER_MILLI)
        if abs(millis) < 1000:
            return f"{millis}ms"
        return f"{millis / 1000:g}s"


class Instant:
    """A point in time, measured in nanoseconds from the start of a run."""

    __slots__ = ("nanoseconds",)

    Epoch: Instant

    def __init__(self, nanoseconds: int):
        self.nanoseconds = int(nanoseconds)

    @classmethod
    def from_seconds(cls, seconds: Union[int, float]) -> Instant:
        return cls(_seconds_to_nanos(seconds))

    def to_seconds(self) -> float:
        return self.nanoseconds / _NANOS_PER_SECOND

    def __add__(self, other):
        if isinstance(other, Duration):
            return Instant(self.nanoseconds + other.nanoseconds)
        if isinstance(other, (int, float)):
            return Instant(self.nanoseconds + _seconds_to_nanos(other))
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Instant):
            return Duration(self.nanoseconds - other.nanoseconds)
        if isinstance(other, Duration):
            return Instant(self.nanoseconds - other.nanoseconds)
        if isinstance(other, (int, float)):
            return Instant(self.nanoseconds - _seconds_to_nanos(other))
        return NotImplemented

    def __eq__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds == other.nanoseconds

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds < other.nanoseconds

    def __le__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds <= other.nanoseconds

    def __gt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds > other.nanoseconds

    def __ge__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds >= other.nanoseconds

    def __hash__(self):
        return hash(("Instant", self.nanoseconds))

    def __repr__(self) -> str:
        return f"Instant({self.to_seconds()}s)"


Duration.ZERO = Duration(0)
Instant.Epoch = Instant(0)
