from contextlib import contextmanager

CONCURRENCY_LIMIT = 128


class AdmissionController:
    """Counting gate on the number of titling jobs in flight.

    Acquiring never waits: over capacity, the caller is simply refused.
    All users share one event loop, so a plain counter is enough.
    """

    def __init__(self, capacity: int = CONCURRENCY_LIMIT):
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.capacity = capacity
        self._held = 0

    @property
    def held(self) -> int:
        return self._held

    def try_acquire(self) -> bool:
        if self._held >= self.capacity:
            return False
        self._held += 1
        return True

    def release(self) -> None:
        if self._held <= 0:
            raise RuntimeError("release() without a matching acquire")
        self._held -= 1

    @contextmanager
    def admit(self):
        """Yield whether a slot was granted; a granted slot is always released."""
        acquired = self.try_acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()
