# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Bounded, newest-first activity log."""

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Deque, Iterator, Tuple

from ...const import ACTIVITY_LOG_CAPACITY


@dataclass(frozen=True)
class LogEntry:
    """One timestamped activity line."""

    timestamp: datetime
    message: str

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.message}"


class ActivityLog:
    """Fixed-capacity log of recent link activity.

    Appending to a full log evicts the oldest entry. The log is never
    consulted for control decisions.

    Example:
        >>> log = ActivityLog(capacity=2)
        >>> _ = log.add("one"); _ = log.add("two"); _ = log.add("three")
        >>> [entry.message for entry in log]
        ['three', 'two']
    """

    def __init__(
        self,
        capacity: int = ACTIVITY_LOG_CAPACITY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if capacity < 1:
            raise ValueError(f"Capacity must be >= 1, got {capacity}")
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._clock = clock

    @property
    def capacity(self) -> int:
        """Maximum number of entries kept."""
        return self._entries.maxlen

    def add(self, message: str) -> LogEntry:
        """Prepend a message stamped with the current local time."""
        entry = LogEntry(self._clock(), message)
        self._entries.appendleft(entry)
        return entry

    def lines(self) -> Tuple[str, ...]:
        """Formatted entries, newest first."""
        return tuple(str(entry) for entry in self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
