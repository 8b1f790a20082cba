"""Tests for the shared call pacer."""

import asyncio

import pytest

from oci_exporter.collector.pacer import CallPacer
from tests.fakes import FakeClock


@pytest.mark.asyncio
async def test_first_call_is_not_delayed():
    clock = FakeClock()
    pacer = CallPacer(0.1, clock=clock, sleep=clock.sleep)

    await pacer.wait()

    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_back_to_back_calls_are_spaced():
    clock = FakeClock()
    pacer = CallPacer(0.1, clock=clock, sleep=clock.sleep)

    await pacer.wait()
    await pacer.wait()

    assert clock.sleeps == [pytest.approx(0.1)]


@pytest.mark.asyncio
async def test_only_remaining_gap_is_waited():
    clock = FakeClock()
    pacer = CallPacer(0.1, clock=clock, sleep=clock.sleep)

    await pacer.wait()
    clock.advance(0.04)
    await pacer.wait()

    assert clock.sleeps == [pytest.approx(0.06)]


@pytest.mark.asyncio
async def test_no_wait_once_interval_has_elapsed():
    clock = FakeClock()
    pacer = CallPacer(0.1, clock=clock, sleep=clock.sleep)

    await pacer.wait()
    clock.advance(0.5)
    await pacer.wait()

    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_spacing_holds_across_concurrent_waiters():
    """Concurrent workers sharing one pacer are spaced globally, not per worker."""
    clock = FakeClock()
    pacer = CallPacer(0.1, clock=clock, sleep=clock.sleep)
    starts: list[float] = []

    async def worker():
        await pacer.wait()
        starts.append(clock())

    await asyncio.gather(*[worker() for _ in range(5)])

    assert len(starts) == 5
    gaps = [b - a for a, b in zip(starts, starts[1:])]
    assert all(gap >= 0.1 - 1e-9 for gap in gaps)


@pytest.mark.asyncio
async def test_zero_interval_disables_pacing():
    clock = FakeClock()
    pacer = CallPacer(0, clock=clock, sleep=clock.sleep)

    for _ in range(3):
        await pacer.wait()

    assert clock.sleeps == []
