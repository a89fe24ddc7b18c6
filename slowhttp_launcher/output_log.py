from __future__ import annotations

import threading
from typing import List, Optional


class OutputLog:
    """Ordered, append-only log of run output shared between threads.

    Writers are the two stream readers and the supervisor; the display layer
    polls ``snapshot()``. Lines from one writer keep their relative order,
    lines from different writers interleave as they arrive.

    Every ``clear()`` starts a new generation. A writer that passes the
    generation it was started for is ignored once the log has moved on, so a
    reader outliving its run cannot write into the next one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._lines: List[str] = []
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def append(self, line: str, generation: Optional[int] = None) -> bool:
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._lines.append(line)
            return True

    def extend(self, lines: List[str], generation: Optional[int] = None) -> bool:
        # Keeps a multi-line status message contiguous.
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._lines.extend(lines)
            return True

    def clear(self) -> int:
        """Empty the log and return the new generation."""

        with self._lock:
            self._lines.clear()
            self._generation += 1
            return self._generation

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self._lines)

    def text(self) -> str:
        return "\n".join(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
