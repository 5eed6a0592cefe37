"""Tests for the event roller."""

import random

from band_dynamics.core.roller import roll_events
from band_dynamics.core.triggers import DramaCandidate
from helpers import FixedRandom, SequenceRandom


def test_fires_when_draw_below_probability():
    candidates = [("a", 50), ("b", 50), ("c", 50)]
    # Draws scale to 10, 90, 20
    assert roll_events(candidates, max_events=3, rng=SequenceRandom([0.1, 0.9, 0.2])) == ["a", "c"]


def test_cap_gives_earlier_candidates_priority():
    candidates = [DramaCandidate(k, 100) for k in ("first", "second", "third", "fourth")]
    rng = SequenceRandom([0.0, 0.0])
    assert roll_events(candidates, rng=rng) == ["first", "second"]
    # Rolling stops once the cap is reached
    assert rng.calls == 2


def test_default_cap_is_two():
    candidates = [(str(i), 100) for i in range(5)]
    assert len(roll_events(candidates, rng=FixedRandom(0.0))) == 2


def test_zero_cap_fires_nothing():
    assert roll_events([("a", 100)], max_events=0, rng=FixedRandom(0.0)) == []


def test_zero_probability_never_fires():
    assert roll_events([("a", 0)], rng=FixedRandom(0.0)) == []


def test_draw_equal_to_probability_does_not_fire():
    assert roll_events([("a", 25)], rng=FixedRandom(0.25)) == []
    assert roll_events([("a", 25)], rng=FixedRandom(0.2499)) == ["a"]


def test_out_of_range_probabilities_are_clamped():
    assert roll_events([("sure", 150)], rng=FixedRandom(0.999999)) == ["sure"]
    assert roll_events([("never", -10)], rng=FixedRandom(0.0)) == []


def test_empty_candidates():
    assert roll_events([], rng=SequenceRandom([])) == []


def test_result_is_bounded_subset_of_candidates():
    rng = random.Random(7)
    for _ in range(500):
        count = rng.randint(0, 6)
        candidates = [DramaCandidate(f"k{i}", rng.uniform(-20, 120)) for i in range(count)]
        cap = rng.randint(0, 4)
        fired = roll_events(candidates, max_events=cap, rng=rng)
        keys = [c.preset_key for c in candidates]
        assert len(fired) <= cap
        assert all(k in keys for k in fired)
        # Fired keys keep candidate order
        assert fired == [k for k in keys if k in fired]


def test_nan_probability_never_fires():
    assert roll_events([("broken", float("nan")), ("ok", 100)], rng=FixedRandom(0.0)) == ["ok"]
