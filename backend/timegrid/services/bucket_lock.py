from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from timegrid.core.exceptions import ScheduleLockTimeoutError


class _Bucket:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = Lock()
        self.users = 0


class BucketLockRegistry:
    """One lock per (semester week, day) so that check-then-insert runs alone.

    A bucket is kept only while some caller holds or waits on it, so the map
    never outgrows the number of concurrent writers.

    Only serialises writers inside this process; a multi-process deployment
    also needs serializable isolation in the database.
    """

    def __init__(self) -> None:
        self._buckets: dict[tuple[int, int], _Bucket] = {}
        self._guard = Lock()

    def _enter(self, key: tuple[int, int]) -> _Bucket:
        with self._guard:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = _Bucket()
            bucket.users += 1
            return bucket

    def _leave(self, key: tuple[int, int], bucket: _Bucket) -> None:
        with self._guard:
            bucket.users -= 1
            if bucket.users == 0 and self._buckets.get(key) is bucket:
                del self._buckets[key]

    @contextmanager
    def hold(self, semester_week_id: int, day_of_week: int, *, timeout: float) -> Iterator[None]:
        key = (semester_week_id, day_of_week)
        bucket = self._enter(key)
        try:
            if not bucket.lock.acquire(timeout=timeout):
                raise ScheduleLockTimeoutError(semester_week_id, day_of_week, timeout)
            try:
                yield
            finally:
                bucket.lock.release()
        finally:
            self._leave(key, bucket)

    def active_buckets(self) -> int:
        with self._guard:
            return len(self._buckets)

    def clear(self) -> None:
        with self._guard:
            self._buckets.clear()


_registry = BucketLockRegistry()


def get_bucket_locks() -> BucketLockRegistry:
    return _registry


def clear_bucket_locks() -> None:
    _registry.clear()
