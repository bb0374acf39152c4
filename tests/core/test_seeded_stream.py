"""SeededStream（Mulberry32）のテスト。"""

from __future__ import annotations

import math

import pytest

from patternix.core.seeded_stream import (
    DEFAULT_SEED,
    FALLBACK_SEED,
    SeededStream,
    coerce_seed,
    next_value,
)


def _take(stream: SeededStream, n: int) -> list[float]:
    return [stream.next() for _ in range(n)]


def test_same_seed_gives_same_sequence() -> None:
    assert _take(SeededStream(12345), 100) == _take(SeededStream(12345), 100)


def test_values_are_in_unit_interval() -> None:
    values = _take(SeededStream(7), 5000)
    assert all(0.0 <= v < 1.0 for v in values)
    # 極端な偏りが無いこと
    mean = sum(values) / len(values)
    assert 0.45 < mean < 0.55


def test_different_seeds_give_different_sequences() -> None:
    a = _take(SeededStream(1), 20)
    b = _take(SeededStream(2), 20)
    assert a != b


def test_pure_next_value_matches_stream() -> None:
    stream = SeededStream(99)
    state = coerce_seed(99)
    for _ in range(10):
        value, state = next_value(state)
        assert stream.next() == value
        assert stream.state == state


def test_float_seed_is_scaled_by_2_pow_32() -> None:
    assert coerce_seed(0.5) == 2**31
    assert _take(SeededStream(0.25), 5) == _take(SeededStream(2**30), 5)


def test_none_seed_uses_default() -> None:
    assert coerce_seed(None) == DEFAULT_SEED
    assert _take(SeededStream(None), 5) == _take(SeededStream(DEFAULT_SEED), 5)


@pytest.mark.parametrize("seed", [math.nan, math.inf, -math.inf])
def test_non_finite_seed_falls_back_deterministically(seed: float) -> None:
    assert coerce_seed(seed) == FALLBACK_SEED
    values = _take(SeededStream(seed), 10)
    assert values == _take(SeededStream(FALLBACK_SEED), 10)
    assert all(math.isfinite(v) for v in values)


def test_large_and_negative_integer_seeds_wrap_to_32_bits() -> None:
    assert coerce_seed(2**32 + 5) == 5
    assert coerce_seed(-1) == 0xFFFFFFFF


def test_uniform_and_centered_ranges() -> None:
    stream = SeededStream(3)
    for _ in range(200):
        u = stream.uniform(2.0, 5.0)
        assert 2.0 <= u < 5.0
        c = stream.centered(0.4)
        assert -0.2 <= c < 0.2
