"""
In-process fixed-window token buckets and the registry that owns them.

Concurrency discipline:

- ``BucketRegistry`` inserts under a single registry lock with a
  double-checked lookup, so one key never maps to two buckets.
- ``TokenBucket`` guards its reset-and-consume sequence with its own lock.
  Buckets for different keys never contend with each other.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from shared.logging import get_logger

DEFAULT_CAPACITY = 100
DEFAULT_INTERVAL_SECONDS = 60.0

Clock = Callable[[], float]


@dataclass(frozen=True)
class BucketState:
    """Point-in-time copy of a bucket's quota."""

    capacity: int
    tokens: int
    interval_start: float
    interval_seconds: float


class TokenBucket:
    """Quota that refills to full capacity once per fixed interval."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: Clock = time.monotonic,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self.capacity = capacity
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens = capacity
        self._interval_start = clock()

    def try_consume(self, cost: int = 1) -> bool:
        """Take ``cost`` tokens if available; return whether the call was admitted."""
        if cost < 1:
            raise ValueError("cost must be at least 1")

        with self._lock:
            now = self._clock()
            # One reset no matter how many intervals went by
            if now >= self._interval_start + self.interval_seconds:
                self._tokens = self.capacity
                self._interval_start = now

            if self._tokens >= cost:
                self._tokens -= cost
                return True
            return False

    @property
    def remaining(self) -> int:
        """Tokens left in the current window, without triggering a reset."""
        with self._lock:
            return self._tokens

    def snapshot(self) -> BucketState:
        with self._lock:
            return BucketState(
                capacity=self.capacity,
                tokens=self._tokens,
                interval_start=self._interval_start,
                interval_seconds=self.interval_seconds,
            )


class BucketRegistry:
    """Process-wide map of client key to TokenBucket, filled lazily.

    Entries are never evicted; every distinct key seen stays resident for
    the life of the process.
    """

    def __init__(self, bucket_factory: Optional[Callable[[], TokenBucket]] = None):
        self._bucket_factory = bucket_factory or TokenBucket
        self._buckets: Dict[str, TokenBucket] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("gatekeeper.bucket_registry")

    def get_or_create(self, key: str) -> TokenBucket:
        """Return the bucket for ``key``, creating it exactly once."""
        bucket = self._buckets.get(key)
        if bucket is not None:
            return bucket

        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._bucket_factory()
                self._buckets[key] = bucket
                self.logger.debug(
                    "Created token bucket",
                    client_key=key,
                    tracked_clients=len(self._buckets)
                )
            return bucket

    def get(self, key: str) -> Optional[TokenBucket]:
        return self._buckets.get(key)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
