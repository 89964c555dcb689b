"""Transient status notifications shown to the user."""

from dataclasses import dataclass

# Seconds a status message stays visible
STATUS_TIMEOUT = 3.0


@dataclass(frozen=True)
class StatusMessage:
    """A message and the monotonic time it was issued at."""

    message: str
    issued_at: float

    def age(self, now: float) -> float:
        return now - self.issued_at

    def is_expired(self, now: float, timeout: float = STATUS_TIMEOUT) -> bool:
        return self.age(now) >= timeout
