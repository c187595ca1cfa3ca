"""
Per-family id allocation for ids shaped like ``<family>-<n>``.

The allocator is seeded once from the ids present after a load and then
increments in memory, so ids issued before a restart are never reissued.
"""

import re
import threading
from typing import Iterable, Optional

_NUMERIC_SUFFIX = re.compile(r"-(\d+)$")


def numeric_suffix(entity_id: str) -> Optional[int]:
    match = _NUMERIC_SUFFIX.search(entity_id)
    if not match:
        return None
    return int(match.group(1))


class IdAllocator:
    def __init__(self, prefix: str):
        self.prefix = prefix
        self._next = 1
        self._lock = threading.Lock()

    @property
    def next_value(self) -> int:
        return self._next

    def reset(self, existing_ids: Iterable[str]) -> None:
        """Restart numbering at (max numeric suffix in ``existing_ids``) + 1."""
        highest = 0
        for entity_id in existing_ids:
            suffix = numeric_suffix(entity_id)
            if suffix is not None and suffix > highest:
                highest = suffix
        with self._lock:
            self._next = highest + 1

    def observe(self, entity_id: str) -> None:
        """Move past an id that was inserted without going through allocate()."""
        suffix = numeric_suffix(entity_id)
        if suffix is None:
            return
        with self._lock:
            if suffix >= self._next:
                self._next = suffix + 1

    def allocate(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return f"{self.prefix}-{value}"
