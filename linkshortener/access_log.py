"""Access log sinks

The mapping store reports every state transition (and every rejected
request) to an access log after the transition has completed. Sinks are
best effort: the store logs and ignores any exception they raise.

Entry format:
{
    "timestamp": "2025-10-15T12:00:00.000Z",
    "type": "CLICK",
    "event": "increment",
    "payload": {"shortcode": "abc123", "clickCount": 3}
}

Classes:
    AccessLogEntry:
        Immutable access log entry.
    AccessLogBase:
        Interface of an append-only access log sink.
    MemoryAccessLog:
        Thread-safe in-process sink, readable via all() and clearable via clear().
    LoggerAccessLog:
        Sink forwarding entries to the `logging` module (JSON on stdout).
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any

from linkshortener.constants import EventType


@dataclass(frozen=True)
class AccessLogEntry:
    timestamp: datetime
    type: EventType
    event: str
    payload: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'type': str(self.type),
            'event': self.event,
            'payload': self.payload,
        }


class AccessLogBase(ABC):
    """Interface of an append-only access log

    Args:
        clock (Callable[[], datetime]):
            Source of entry timestamps. Defaults to the current UTC time.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now(UTC))

    def log(self, type: EventType | str, event: str, payload: dict[str, Any] | None = None) -> AccessLogEntry:
        """Append an entry to the access log

        Args:
            type (EventType | str): one of CREATE, CLICK, ERROR
            event (str): short event name, e.g. 'mapping' or 'invalid_url'
            payload (dict | None): structured event details

        Returns:
            AccessLogEntry: the appended entry

        Raises:
            ValueError: if `type` is not a known EventType
        """
        entry = AccessLogEntry(
            timestamp=self.clock(),
            type=EventType(type),
            event=event,
            payload=dict(payload or {}),
        )
        self.write(entry)
        return entry

    @abstractmethod
    def write(self, entry: AccessLogEntry) -> None:
        pass

    def flush(self) -> None:
        return None


class MemoryAccessLog(AccessLogBase):
    """Append-only, in-process access log

    Args:
        max_entries (int | None):
            Keep only the newest `max_entries` entries. None keeps everything.
        clock (Callable[[], datetime] | None):
            Source of entry timestamps.

    Example:
        >>> access_log = MemoryAccessLog()
        >>> _ = access_log.log('CREATE', 'mapping', {'shortcode': 'abc123'})
        >>> [entry.event for entry in access_log.all()]
        ['mapping']
    """

    def __init__(self, max_entries: int | None = None, clock: Callable[[], datetime] | None = None):
        super().__init__(clock=clock)
        if max_entries is not None and max_entries <= 0:
            raise ValueError(f'Max entries must be a positive integer (given value: {max_entries}).')
        self._lock = threading.Lock()
        self._entries: deque[AccessLogEntry] = deque(maxlen=max_entries)

    def write(self, entry: AccessLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def all(self) -> list[AccessLogEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class LoggerAccessLog(AccessLogBase):
    """Access log forwarding entries to a `logging.Logger`

    Entries are emitted at INFO (ERROR entries at WARNING) with the entry
    fields attached as `extra`, so JsonFormatter renders them as JSON.
    """

    def __init__(self, logger: logging.Logger | None = None, clock: Callable[[], datetime] | None = None):
        super().__init__(clock=clock)
        self.logger = logger or logging.getLogger('linkshortener.access')

    def write(self, entry: AccessLogEntry) -> None:
        level = logging.WARNING if entry.type == EventType.ERROR else logging.INFO
        record = entry.as_dict()
        self.logger.log(
            level,
            '%s %s',
            record['type'],
            record['event'],
            extra={'accessTimestamp': record['timestamp'], 'type': record['type'], 'event': record['event'], 'payload': record['payload']},
        )

    def flush(self) -> None:
        for handler in self.logger.handlers:
            handler.flush()
