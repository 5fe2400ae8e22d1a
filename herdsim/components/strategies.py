"""Retry-delay strategies: how long a rejected client waits before retrying.

Each strategy maps ``(attempt, previous_delay)`` to the next delay, where
``attempt`` counts the client's rejections so far (0 for the first retry) and
``previous_delay`` is the delay the client slept last time (the base delay
before any retry). Strategies keep no per-client state; the client carries
both values across calls.

Available strategies:
- ConstantRetry ("constant"): always 1ms, a tight retry loop
- ExponentialBackoff ("backoff"): base * 2^attempt, capped
- FullJitter ("jitter"): uniform in [0, backoff(attempt))
- DecorrelatedJitter ("decorrelated"): uniform in [base, 3 * previous), capped

Randomized strategies draw from their own ``random.Random`` rather than the
module-level generator, so a seeded run is reproducible.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Callable

from herdsim.core.temporal import Duration
from herdsim.errors import UnknownStrategyError

BASE_DELAY = Duration.from_millis(100)
MAX_DELAY = Duration.from_seconds(10)
CONSTANT_DELAY = Duration.from_millis(1)

# 100ms * 2^7 already exceeds the cap; larger exponents only make huge ints.
_MAX_EXPONENT = 32


class RetryStrategy(ABC):
    """Computes the delay before a client's next attempt.

    Subclasses implement next_delay(); instances are callable so a strategy
    can be passed wherever a ``(attempt, previous_delay) -> Duration``
    function is expected.
    """

    name: str = ""

    @abstractmethod
    def next_delay(self, attempt: int, previous_delay: Duration) -> Duration:
        """Delay before the next attempt.

        Args:
            attempt: Rejections so far for this client (0-indexed).
            previous_delay: The delay returned for the previous retry, or the
                base delay before the first one.
        """
        raise NotImplementedError

    def __call__(self, attempt: int, previous_delay: Duration) -> Duration:
        return self.next_delay(attempt, previous_delay)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ConstantRetry(RetryStrategy):
    """Retry after a fixed 1ms regardless of history."""

    name = "constant"

    def __init__(self, delay: Duration = CONSTANT_DELAY):
        self.delay = delay

    def next_delay(self, attempt: int, previous_delay: Duration) -> Duration:
        return self.delay


class ExponentialBackoff(RetryStrategy):
    """Double the delay on every rejection: ``min(base * 2^attempt, cap)``."""

    name = "backoff"

    def __init__(self, base: Duration = BASE_DELAY, cap: Duration = MAX_DELAY):
        if base <= Duration.ZERO:
            raise ValueError(f"base must be > 0, got {base!r}")
        if cap < base:
            raise ValueError(f"cap must be >= base, got cap={cap!r} base={base!r}")
        self.base = base
        self.cap = cap

    def next_delay(self, attempt: int, previous_delay: Duration) -> Duration:
        if attempt >= _MAX_EXPONENT:
            return self.cap
        delay = self.base * (2 ** attempt)
        return delay if delay < self.cap else self.cap


class FullJitter(RetryStrategy):
    """Uniformly random delay in ``[0, backoff(attempt))``.

    Args:
        rng: Random source; a fresh unseeded generator when omitted.
    """

    name = "jitter"

    def __init__(
        self,
        base: Duration = BASE_DELAY,
        cap: Duration = MAX_DELAY,
        rng: random.Random | None = None,
    ):
        self._backoff = ExponentialBackoff(base, cap)
        self.rng = rng if rng is not None else random.Random()

    def next_delay(self, attempt: int, previous_delay: Duration) -> Duration:
        ceiling = self._backoff.next_delay(attempt, previous_delay).nanoseconds
        if ceiling <= 0:
            return Duration.ZERO
        return Duration(self.rng.randrange(ceiling))


class DecorrelatedJitter(RetryStrategy):
    """Delay seeded by the previous delay instead of the attempt count.

    The next delay is uniform in ``[base, 3 * max(previous, base))`` and then
    capped, so delays wander upward without the lockstep of plain backoff.

    Args:
        rng: Random source; a fresh unseeded generator when omitted.
    """

    name = "decorrelated"

    def __init__(
        self,
        base: Duration = BASE_DELAY,
        cap: Duration = MAX_DELAY,
        rng: random.Random | None = None,
    ):
        if base <= Duration.ZERO:
            raise ValueError(f"base must be > 0, got {base!r}")
        if cap < base:
            raise ValueError(f"cap must be >= base, got cap={cap!r} base={base!r}")
        self.base = base
        self.cap = cap
        self.rng = rng if rng is not None else random.Random()

    def next_delay(self, attempt: int, previous_delay: Duration) -> Duration:
        previous = previous_delay if previous_delay > self.base else self.base
        delay = Duration(self.rng.randrange(self.base.nanoseconds, previous.nanoseconds * 3))
        return delay if delay < self.cap else self.cap


_REGISTRY: dict[str, Callable[[random.Random], RetryStrategy]] = {
    ConstantRetry.name: lambda rng: ConstantRetry(),
    ExponentialBackoff.name: lambda rng: ExponentialBackoff(),
    FullJitter.name: lambda rng: FullJitter(rng=rng),
    DecorrelatedJitter.name: lambda rng: DecorrelatedJitter(rng=rng),
}

STRATEGY_NAMES: tuple[str, ...] = tuple(_REGISTRY)


def get_strategy(
    name: str,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> RetryStrategy:
    """Build the strategy registered under ``name``.

    Args:
        name: One of STRATEGY_NAMES.
        rng: Random source for randomized strategies.
        seed: Seed for a new random source when ``rng`` is not given.

    Raises:
        UnknownStrategyError: If ``name`` is not registered.
    """
    try:
        factory = _REGISTRY[name]
    except KeyError:
        raise UnknownStrategyError(name, STRATEGY_NAMES) from None
    if rng is None:
        rng = random.Random(seed)
    return factory(rng)
