from __future__ import annotations

import pytest

from core import UNBOUNDED, DeadlineClock, remaining_msec
from utils.exceptions import DeadlineExceeded


def test_remaining_is_unbounded_for_negative_budget() -> None:
    assert remaining_msec(-1, 10_000) == UNBOUNDED
    assert remaining_msec(1000, 250) == 750
    assert remaining_msec(1000, 1500) == -500


def test_clock_measures_from_start(fake_clock) -> None:
    fake_clock.now = 10.0
    clock = DeadlineClock.start(1000, clock=fake_clock)
    fake_clock.now = 10.25

    assert clock.elapsed_msec() == 250
    assert clock.remaining_msec() == 750
    assert clock.exhausted() is False


def test_clamp_shortens_delay_to_remaining_budget(fake_clock) -> None:
    clock = DeadlineClock.start(1000, clock=fake_clock)
    fake_clock.now = 0.75

    assert clock.clamp(2000) == 250
    assert clock.clamp(100) == 100


def test_check_raises_once_budget_is_used(fake_clock) -> None:
    clock = DeadlineClock.start(500, clock=fake_clock)
    fake_clock.now = 0.5

    assert clock.exhausted() is True
    with pytest.raises(DeadlineExceeded) as exc_info:
        clock.check()
    assert exc_info.value.budget_msec == 500
    assert exc_info.value.elapsed_msec == 500


def test_unbounded_clock_never_clamps(fake_clock) -> None:
    clock = DeadlineClock.start(UNBOUNDED, clock=fake_clock)
    fake_clock.now = 3600.0

    assert clock.bounded is False
    assert clock.exhausted() is False
    assert clock.clamp(60_000) == 60_000


def test_zero_budget_is_exhausted_immediately(fake_clock) -> None:
    clock = DeadlineClock.start(0, clock=fake_clock)
    with pytest.raises(DeadlineExceeded):
        clock.clamp(10)
