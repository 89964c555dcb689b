"""Bounded temperature history for trend display."""

from collections import deque
from collections.abc import Iterator

# Two minutes at the default 2 s polling interval
HISTORY_CAPACITY = 60


class TemperatureHistory:
    """Fixed-capacity FIFO of (cpu_temp, keyboard_temp) pairs.

    Entries are kept in chronological order; once full, pushing a new pair
    evicts the oldest one.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._entries: deque[tuple[float, float]] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen  # type: ignore[return-value]

    def push(self, cpu_temp: float, keyboard_temp: float) -> None:
        self._entries.append((cpu_temp, keyboard_temp))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        return iter(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def cpu_points(self) -> list[tuple[int, float]]:
        """CPU temperatures paired with their tick offset in the window."""
        return [(i, cpu) for i, (cpu, _kbd) in enumerate(self._entries)]

    def kbd_points(self) -> list[tuple[int, float]]:
        """Keyboard estimates paired with their tick offset in the window."""
        return [(i, kbd) for i, (_cpu, kbd) in enumerate(self._entries)]
