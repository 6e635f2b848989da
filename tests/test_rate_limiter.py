"""Tests for per-domain request pacing."""

import asyncio
import random

import pytest

from newsdesk.adapters.fetch import DomainRateLimiter


class FakeTime:
    """Clock whose sleep advances time instead of waiting."""

    def __init__(self) -> None:
        self.now = 1000.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def make_limiter(fake: FakeTime) -> DomainRateLimiter:
    return DomainRateLimiter(
        min_spacing=5.0,
        jitter=(1.0, 3.0),
        clock=fake.clock,
        sleep=fake.sleep,
        rng=random.Random(42),
    )


@pytest.mark.asyncio
async def test_first_request_is_not_delayed() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)

    await limiter.acquire("taz.de")

    assert fake.sleeps == []
    assert limiter.last_access("taz.de") == 1000.0


@pytest.mark.asyncio
async def test_same_domain_requests_are_spaced() -> None:
    """Consecutive same-domain requests are at least 5 s apart, plus 1-3 s jitter."""
    fake = FakeTime()
    limiter = make_limiter(fake)

    await limiter.acquire("taz.de")
    fake.now += 1.0
    await limiter.acquire("taz.de")

    assert len(fake.sleeps) == 1
    assert 4.0 + 1.0 <= fake.sleeps[0] <= 4.0 + 3.0
    assert limiter.last_access("taz.de") - 1000.0 >= 5.0


@pytest.mark.asyncio
async def test_no_wait_after_spacing_elapsed() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)

    await limiter.acquire("taz.de")
    fake.now += 6.0
    await limiter.acquire("taz.de")

    assert fake.sleeps == []


@pytest.mark.asyncio
async def test_concurrent_same_domain_requests_are_serialized() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)
    stamps: list[float] = []

    async def request() -> None:
        await limiter.acquire("hltv.org")
        stamps.append(fake.now)

    await asyncio.gather(*(request() for _ in range(3)))

    assert len(stamps) == 3
    gaps = [later - earlier for earlier, later in zip(stamps, stamps[1:])]
    assert all(gap >= 5.0 for gap in gaps)


@pytest.mark.asyncio
async def test_different_domains_do_not_wait() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)

    await asyncio.gather(
        limiter.acquire("taz.de"),
        limiter.acquire("tagesschau.de"),
        limiter.acquire("hltv.org"),
    )

    assert fake.sleeps == []


@pytest.mark.asyncio
async def test_extra_delay_is_slept_before_stamp() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)

    await limiter.acquire("hltv.org", extra_delay=2.5)

    assert fake.sleeps == [2.5]
    assert limiter.last_access("hltv.org") == 1002.5


def test_touch_refreshes_timestamp() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)

    limiter.touch("hltv.org")
    fake.now += 3.0
    limiter.touch("hltv.org")

    assert limiter.last_access("hltv.org") == 1003.0


def test_random_delay_within_bounds() -> None:
    limiter = DomainRateLimiter(rng=random.Random(1))

    delays = [limiter.random_delay((2.0, 3.0)) for _ in range(50)]

    assert all(2.0 <= d <= 3.0 for d in delays)


@pytest.mark.asyncio
async def test_exclusive_hold_delays_other_requests() -> None:
    """Accesses made while the domain is held count for the next request."""
    fake = FakeTime()
    limiter = make_limiter(fake)
    await limiter.acquire("hltv.org")

    async def recovery() -> None:
        async with limiter.exclusive("hltv.org"):
            await fake.sleep(4.0)
            limiter.touch("hltv.org")

    waiter_stamps: list[float] = []

    async def waiter() -> None:
        await limiter.acquire("hltv.org")
        waiter_stamps.append(limiter.last_access("hltv.org"))

    await asyncio.gather(recovery(), waiter())

    touched_at = 1004.0
    assert waiter_stamps[0] - touched_at >= 5.0


@pytest.mark.asyncio
async def test_locks_are_released_when_idle() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)

    await asyncio.gather(*(limiter.acquire(f"site{i}.test") for i in range(20)))

    assert limiter.held_domains == set()


@pytest.mark.asyncio
async def test_stale_access_times_are_forgotten() -> None:
    fake = FakeTime()
    limiter = make_limiter(fake)

    await limiter.acquire("old.test")
    fake.now += 10.0
    await limiter.acquire("new.test")

    assert limiter.last_access("old.test") is None
    assert limiter.last_access("new.test") == fake.now


@pytest.mark.asyncio
async def test_wait_rechecks_after_access_during_sleep() -> None:
    """An access recorded while a request sleeps pushes that request back."""
    fake = FakeTime()
    limiter = make_limiter(fake)
    await limiter.acquire("hltv.org")
    fake.now += 1.0
    touched: list[float] = []

    async def other_access() -> None:
        limiter.touch("hltv.org")
        touched.append(fake.now)

    await asyncio.gather(limiter.acquire("hltv.org"), other_access())

    assert len(fake.sleeps) == 2
    assert limiter.last_access("hltv.org") - touched[0] >= 5.0
