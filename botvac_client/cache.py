"""Time-bounded cache of robot state snapshots."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

from .const import DEFAULT_STATE_TTL
from .models import CachedState, RawRobotState, RobotIdentity

_LOGGER = logging.getLogger(__name__)


class _FetchAbandoned(Exception):
    """The task running a shared fetch was cancelled before it finished."""


class StateSource(Protocol):
    """Anything that can fetch a robot state (normally a BotvacClient)."""

    async def get_state(self, robot: RobotIdentity) -> RawRobotState: ...


class StateCache:
    """Caches the last state snapshot per robot for ``ttl`` seconds.

    Concurrent reads during a miss share one remote fetch (single-flight).
    ``invalidate()`` bumps a per-robot generation: a fetch that was already
    running when the cache was invalidated neither stores its result nor is
    joined by later readers, so nothing fetched before a command can be
    served after it.
    If the reader that started a fetch is cancelled, the readers that
    joined it fetch again.
    """

    def __init__(
        self,
        client: StateSource,
        *,
        ttl: float = DEFAULT_STATE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CachedState] = {}
        self._generations: dict[str, int] = {}
        self._inflight: dict[str, tuple[int, asyncio.Future[RawRobotState]]] = {}

    def peek(self, robot: RobotIdentity) -> CachedState | None:
        """Return the cached entry for a robot without any I/O."""
        return self._entries.get(robot.serial)

    async def get(self, robot: RobotIdentity, *, force: bool = False) -> RawRobotState:
        """Return the robot's state, fetching it if the cache is stale.

        Args:
            robot: Robot to read.
            force: Skip the cached entry even if it is still valid.
        """
        key = robot.serial
        while True:
            if not force:
                entry = self._entries.get(key)
                if entry is not None and entry.is_valid(self._clock()):
                    return entry.snapshot

            generation = self._generations.get(key, 0)
            inflight = self._inflight.get(key)
            if inflight is None or inflight[0] != generation:
                return await self._fetch(robot, generation)

            _LOGGER.debug("%s: joining in-flight state fetch", robot.name)
            try:
                return await asyncio.shield(inflight[1])
            except _FetchAbandoned:
                _LOGGER.debug("%s: shared state fetch was cancelled, fetching again", robot.name)

    async def _fetch(self, robot: RobotIdentity, generation: int) -> RawRobotState:
        key = robot.serial
        future: asyncio.Future[RawRobotState] = asyncio.get_running_loop().create_future()
        self._inflight[key] = (generation, future)
        try:
            snapshot = await self._client.get_state(robot)
        except asyncio.CancelledError:
            # Only the task that started the fetch was cancelled; joiners retry.
            future.set_exception(_FetchAbandoned())
            future.exception()
            raise
        except Exception as err:
            future.set_exception(err)
            # Waiters re-raise it; don't let asyncio log it as unretrieved.
            future.exception()
            raise
        finally:
            current = self._inflight.get(key)
            if current is not None and current[1] is future:
                del self._inflight[key]

        if self._generations.get(key, 0) == generation:
            self._entries[key] = CachedState(
                snapshot=snapshot, fetched_at=self._clock(), ttl=self.ttl
            )
        else:
            _LOGGER.debug("%s: discarding state fetched before invalidation", robot.name)
        future.set_result(snapshot)
        return snapshot

    def invalidate(self, robot: RobotIdentity) -> None:
        """Force the next read for this robot to fetch fresh state."""
        key = robot.serial
        self._entries.pop(key, None)
        self._generations[key] = self._generations.get(key, 0) + 1

    def clear(self) -> None:
        """Invalidate every robot."""
        for key in list(self._entries) + list(self._inflight):
            self._generations[key] = self._generations.get(key, 0) + 1
        self._entries.clear()
