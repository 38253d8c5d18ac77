"""In-memory brute-force protection keyed by client identity.

Process-local by nature: every worker process holds its own ledger and
nothing survives a restart. The lockout is a deterrent, not a boundary.
"""
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, replace

# Lockout policy
MAX_ATTEMPTS = 10
LOCKOUT_DURATION = 2 * 60 * 60  # 2 hours
PRUNE_INTERVAL = 10 * 60


@dataclass
class AttemptRecord:
    failure_count: int = 0
    last_failure_time: float = 0.0


class AttemptLedger:
    """Failed-attempt counts per client identity and the lockout decision."""

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        lockout_duration: float = LOCKOUT_DURATION,
    ):
        self.max_attempts = max_attempts
        self.lockout_duration = lockout_duration
        self._records: dict[str, AttemptRecord] = {}
        # identity -> [lock, number of holders]; removed when nobody holds it
        self._key_locks: dict[str, list] = {}
        self._lock = threading.Lock()
        self._last_prune = 0.0

    @contextmanager
    def hold(self, identity: str):
        """Serialize a check-then-record sequence for one identity."""
        with self._lock:
            entry = self._key_locks.get(identity)
            if entry is None:
                entry = self._key_locks[identity] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._key_locks[identity]

    def is_locked_out(self, identity: str, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        with self._lock:
            rec = self._records.get(identity)
            if rec is None:
                return False
            return (
                rec.failure_count >= self.max_attempts
                and now - rec.last_failure_time < self.lockout_duration
            )

    def record_failure(self, identity: str, now: float | None = None) -> int:
        """Count one failed attempt. Returns the streak length after the update."""
        now = time.time() if now is None else now
        with self._lock:
            rec = self._records.get(identity)
            if rec is None:
                rec = AttemptRecord()
                self._records[identity] = rec
            elif rec.failure_count and now - rec.last_failure_time >= self.lockout_duration:
                # Stale streak can no longer lock anyone out; start over.
                rec.failure_count = 0
            rec.failure_count += 1
            rec.last_failure_time = now
            count = rec.failure_count
            if now - self._last_prune >= PRUNE_INTERVAL:
                self._prune_locked(now)
                self._last_prune = now
        return count

    def record_success(self, identity: str, now: float | None = None) -> None:
        # last_failure_time is deliberately left alone.
        with self._lock:
            rec = self._records.get(identity)
            if rec is not None:
                rec.failure_count = 0

    def get(self, identity: str) -> AttemptRecord | None:
        with self._lock:
            rec = self._records.get(identity)
            return replace(rec) if rec is not None else None

    def prune(self, now: float | None = None) -> int:
        """Drop records that can no longer affect a lockout decision."""
        now = time.time() if now is None else now
        with self._lock:
            return self._prune_locked(now)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _prune_locked(self, now: float) -> int:
        stale = [
            key for key, rec in self._records.items()
            if (
                rec.failure_count == 0
                or now - rec.last_failure_time >= self.lockout_duration
            )
        ]
        for key in stale:
            del self._records[key]
        return len(stale)
