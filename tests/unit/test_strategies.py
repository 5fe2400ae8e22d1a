"""Tests for retry-delay strategies and the strategy registry."""

from __future__ import annotations

import random
import statistics

import pytest

from herdsim.components.strategies import (
    BASE_DELAY,
    CONSTANT_DELAY,
    MAX_DELAY,
    STRATEGY_NAMES,
    ConstantRetry,
    DecorrelatedJitter,
    ExponentialBackoff,
    FullJitter,
    get_strategy,
)
from herdsim.core.temporal import Duration
from herdsim.errors import UnknownStrategyError

SAMPLES = 10_000


def _sample_inputs(rng: random.Random, n: int = SAMPLES):
    """Random (attempt, previous_delay) pairs covering capped and uncapped ranges."""
    for _ in range(n):
        attempt = rng.randrange(0, 40)
        previous = Duration(rng.randrange(0, 2 * MAX_DELAY.nanoseconds))
        yield attempt, previous


class TestConstants:
    def test_values(self):
        assert BASE_DELAY == Duration.from_millis(100)
        assert MAX_DELAY == Duration.from_seconds(10)
        assert CONSTANT_DELAY == Duration.from_millis(1)


class TestConstantRetry:
    def test_always_one_millisecond(self, rng):
        strategy = ConstantRetry()
        for attempt, previous in _sample_inputs(rng):
            assert strategy(attempt, previous) == Duration.from_millis(1)


class TestExponentialBackoff:
    def test_doubles_from_base(self):
        strategy = ExponentialBackoff()
        delays = [strategy(attempt, BASE_DELAY) for attempt in range(7)]
        assert [d.to_millis() for d in delays] == [100, 200, 400, 800, 1600, 3200, 6400]

    def test_capped(self):
        strategy = ExponentialBackoff()
        assert strategy(7, BASE_DELAY) == MAX_DELAY
        assert strategy(1000, BASE_DELAY) == MAX_DELAY

    def test_bounds_and_monotonic(self, rng):
        strategy = ExponentialBackoff()
        for attempt, previous in _sample_inputs(rng):
            delay = strategy(attempt, previous)
            assert BASE_DELAY <= delay <= MAX_DELAY
        delays = [strategy(a, BASE_DELAY) for a in range(40)]
        assert delays == sorted(delays)

    def test_ignores_previous_delay(self):
        strategy = ExponentialBackoff()
        assert strategy(3, Duration.ZERO) == strategy(3, Duration.from_seconds(9))

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            ExponentialBackoff(base=Duration.ZERO)
        with pytest.raises(ValueError):
            ExponentialBackoff(base=Duration.from_seconds(2), cap=Duration.from_seconds(1))


class TestFullJitter:
    def test_strictly_below_backoff(self, rng):
        backoff = ExponentialBackoff()
        jitter = FullJitter(rng=random.Random(7))
        for attempt, previous in _sample_inputs(rng):
            delay = jitter(attempt, previous)
            assert Duration.ZERO <= delay < backoff(attempt, previous)
            assert delay < MAX_DELAY

    def test_mean_grows_with_attempt_until_capped(self):
        jitter = FullJitter(rng=random.Random(99))
        means = [
            statistics.fmean(jitter(attempt, BASE_DELAY).nanoseconds for _ in range(2_000))
            for attempt in range(8)
        ]
        for earlier, later in zip(means, means[1:6]):
            assert later > earlier
        # Capped: half the cap on average.
        assert means[7] == pytest.approx(MAX_DELAY.nanoseconds / 2, rel=0.1)

    def test_seeded_is_reproducible(self):
        a = FullJitter(rng=random.Random(3))
        b = FullJitter(rng=random.Random(3))
        assert [a(i, BASE_DELAY) for i in range(20)] == [b(i, BASE_DELAY) for i in range(20)]


class TestDecorrelatedJitter:
    def test_within_base_and_cap(self, rng):
        strategy = DecorrelatedJitter(rng=random.Random(11))
        for attempt, previous in _sample_inputs(rng):
            delay = strategy(attempt, previous)
            assert BASE_DELAY <= delay <= MAX_DELAY

    def test_bounded_by_three_times_previous(self):
        strategy = DecorrelatedJitter(rng=random.Random(5))
        previous = Duration.from_millis(400)
        for _ in range(1_000):
            delay = strategy(0, previous)
            assert BASE_DELAY <= delay < previous * 3

    def test_previous_below_base_treated_as_base(self):
        strategy = DecorrelatedJitter(rng=random.Random(5))
        for _ in range(1_000):
            delay = strategy(0, Duration.ZERO)
            assert BASE_DELAY <= delay < BASE_DELAY * 3

    def test_chained_delays_stay_bounded(self):
        strategy = DecorrelatedJitter(rng=random.Random(21))
        previous = BASE_DELAY
        for attempt in range(500):
            previous = strategy(attempt, previous)
            assert BASE_DELAY <= previous <= MAX_DELAY


class TestRegistry:
    def test_names(self):
        assert STRATEGY_NAMES == ("constant", "backoff", "jitter", "decorrelated")

    @pytest.mark.parametrize(
        "name,cls",
        [
            ("constant", ConstantRetry),
            ("backoff", ExponentialBackoff),
            ("jitter", FullJitter),
            ("decorrelated", DecorrelatedJitter),
        ],
    )
    def test_get_strategy(self, name, cls):
        strategy = get_strategy(name, seed=1)
        assert isinstance(strategy, cls)
        assert strategy.name == name

    def test_seed_makes_runs_reproducible(self):
        a = get_strategy("decorrelated", seed=42)
        b = get_strategy("decorrelated", seed=42)
        assert [a(0, BASE_DELAY) for _ in range(10)] == [b(0, BASE_DELAY) for _ in range(10)]

    def test_injected_rng_is_used(self):
        rng = random.Random(8)
        strategy = get_strategy("jitter", rng=rng)
        assert strategy.rng is rng

    def test_unknown_name(self):
        with pytest.raises(UnknownStrategyError) as excinfo:
            get_strategy("linear")
        assert excinfo.value.name == "linear"
        assert excinfo.value.valid_names == STRATEGY_NAMES
        assert "Use: constant, backoff, jitter, decorrelated" in str(excinfo.value)

    def test_unknown_name_is_value_error(self):
        with pytest.raises(ValueError):
            get_strategy("")
