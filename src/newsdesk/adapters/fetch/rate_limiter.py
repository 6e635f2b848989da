"""Per-domain request pacing."""

import asyncio
import random
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)


class DomainRateLimiter:
    """Owner of the domain -> last access map.

    Requests to the same domain are serialized by a per-domain lock that is
    held across the pacing sleep. Different domains never wait for each other.
    Locks live only while a request for their domain is pending, and access
    times are forgotten once they no longer delay anything.
    """

    def __init__(
        self,
        min_spacing: float = 5.0,
        jitter: tuple[float, float] = (1.0, 3.0),
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.min_spacing = min_spacing
        self.jitter = jitter
        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._last_access: dict[str, float] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def last_access(self, domain: str) -> Optional[float]:
        return self._last_access.get(domain)

    @property
    def held_domains(self) -> set[str]:
        """Domains with a request currently holding or waiting for their lock."""
        return set(self._locks)

    async def acquire(self, domain: str, extra_delay: float = 0.0) -> None:
        """Wait until ``domain`` may be requested again, then record the access.

        Args:
            domain: Host the next request goes to
            extra_delay: Profile delay slept after pacing, before the stamp
        """
        async with self.exclusive(domain):
            await self.wait_turn(domain)

            if extra_delay > 0:
                await self._sleep(extra_delay)

            # Stamped before the request goes out so a slow or failing
            # request cannot be retried against the domain right away.
            self._last_access[domain] = self._clock()

    @asynccontextmanager
    async def exclusive(self, domain: str) -> AsyncIterator[None]:
        """Hold the domain's lock, e.g. for a multi-request recovery sequence.

        Not reentrant: do not call ``acquire`` for the same domain inside.
        """
        lock = self._locks.setdefault(domain, asyncio.Lock())
        self._lock_users[domain] = self._lock_users.get(domain, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[domain] -= 1
            if not self._lock_users[domain]:
                del self._lock_users[domain]
                del self._locks[domain]
                self._forget_idle()

    async def wait_turn(self, domain: str) -> None:
        """Sleep until ``min_spacing`` has passed since the domain's last access.

        Call while holding the domain. The timestamp is re-read after every
        sleep, so accesses recorded in the meantime extend the wait.
        """
        while True:
            last = self._last_access.get(domain)
            if last is None:
                return
            elapsed = self._clock() - last
            if elapsed >= self.min_spacing:
                return
            wait = self.min_spacing - elapsed + self._rng.uniform(*self.jitter)
            logger.debug("Pacing domain", domain=domain, wait=round(wait, 2))
            await self._sleep(wait)

    def touch(self, domain: str) -> None:
        """Record an access that bypassed ``acquire`` (recovery requests)."""
        self._last_access[domain] = self._clock()

    def random_delay(self, bounds: tuple[float, float]) -> float:
        return self._rng.uniform(*bounds)

    async def sleep(self, seconds: float) -> None:
        await self._sleep(seconds)

    def _forget_idle(self) -> None:
        now = self._clock()
        stale = [
            domain
            for domain, last in self._last_access.items()
            if domain not in self._locks and now - last >= self.min_spacing
        ]
        for domain in stale:
            del self._last_access[domain]
