"""Bounded in-memory log of recently ingested payloads."""
import threading
import structlog

log = structlog.get_logger()


class PayloadLog:
    """
    Fixed-capacity ring buffer of human-readable payload summaries.

    Entries are kept in insertion order; once the buffer is full each
    append overwrites the oldest entry. A single lock covers append,
    count and snapshot so concurrent request threads always observe
    a consistent buffer.

    Contents are process-local and lost on restart.
    """

    def __init__(self, max_size: int = 1000, enabled: bool = True):
        """
        Initialize the payload log.

        Args:
            max_size: Maximum number of entries retained
            enabled: When False, append is a no-op

        Raises:
            ValueError: If max_size is smaller than 1
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._capacity = max_size
        self._enabled = enabled
        self._slots: list[str | None] = [None] * max_size
        self._head = 0  # index of the oldest entry
        self._size = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def enabled(self) -> bool:
        return self._enabled

    def append(self, entry: str) -> None:
        """
        Append an entry, evicting the oldest one if the log is full.

        Args:
            entry: Formatted log line
        """
        if not self._enabled:
            return

        with self._lock:
            if self._size == self._capacity:
                # Overwrite the oldest slot and advance the head
                self._slots[self._head] = entry
                self._head = (self._head + 1) % self._capacity
            else:
                self._slots[(self._head + self._size) % self._capacity] = entry
                self._size += 1

        log.info("payload.stored", entry=entry)

    def snapshot(self) -> list[str]:
        """Return a copy of the current entries, oldest first."""
        with self._lock:
            return [
                self._slots[(self._head + i) % self._capacity]
                for i in range(self._size)
            ]

    def count(self) -> int:
        """Get the current number of entries."""
        with self._lock:
            return self._size
