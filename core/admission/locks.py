import threading
from contextlib import contextmanager
from typing import Any, Dict, List


class CandidateLockRegistry:
    """
    One lock per candidate, created on demand and dropped when unused.

    Serializes admissions inside one process; across processes the row
    lock taken by ProfileRepository.lock_seeker does the same job.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, holders]
        self._entries: Dict[str, List[Any]] = {}

    @contextmanager
    def hold(self, key: Any):
        name = str(key)
        with self._guard:
            entry = self._entries.setdefault(name, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._entries.pop(name, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
