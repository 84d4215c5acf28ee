"""Event log — the record of one compiler session.

The collector appends every diagnostic and build event here.  In watch mode
rebuilds append from timer threads for as long as the session runs, so the
buffer keeps only the most recent ``max_events`` entries.

Thread Safety:
    ``append`` and the readers share one ``threading.Lock``.

"""

import threading
from collections import deque

from slotc._types import DiagnosticLevel
from slotc.observability.events import Diagnostic, SlotcEvent


class EventLog:
    """Bounded, thread-safe store of build events and diagnostics.

    Args:
        max_events: Oldest entries are dropped beyond this many.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[SlotcEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: SlotcEvent) -> None:
        with self._lock:
            self._events.append(event)

    def diagnostics(self, level: DiagnosticLevel | None = None) -> list[Diagnostic]:
        """Diagnostics in recording order, optionally only those tagged *level*."""
        with self._lock:
            return [
                event
                for event in self._events
                if isinstance(event, Diagnostic)
                and (level is None or event.level == level)
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
