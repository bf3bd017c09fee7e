"""Lazily resolved, memoized value shared across concurrent callers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

log = logging.getLogger("victron-vrm.identity")

T = TypeVar("T")


class LazyValue(Generic[T]):
    """Holds a value computed at most once, on first demand.

    The lock is held across the whole check-compute-store sequence, so
    callers arriving while a computation is in flight wait for it instead
    of starting their own. A failed computation leaves the value unset.
    """

    def __init__(self, value: T | None = None):
        self._value = value
        self._lock = asyncio.Lock()

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def is_set(self) -> bool:
        return self._value is not None

    async def get_or_init(self, compute: Callable[[], Awaitable[T]]) -> T:
        if self._value is not None:
            return self._value

        async with self._lock:
            if self._value is None:
                log.debug("Resolving lazy value")
                self._value = await compute()
            return self._value
