"""Build observability — classified diagnostics and build events.

All events are frozen dataclasses with nanosecond timestamps, safe to
record from watch-mode timer threads.

Quick Start:
    >>> from slotc.observability import BuildCollector, EventLog
    >>> log = EventLog()
    >>> collector = BuildCollector(log, echo=False)
    >>> collector.report("warning", "No slots in _layout.html")
    >>> log.diagnostics("warning")[0].message
    'No slots in _layout.html'

"""

from slotc.observability.collector import BuildCollector
from slotc.observability.events import (
    BuildCompleted,
    BuildEvent,
    Diagnostic,
    RebuildTriggered,
    SlotcEvent,
    now_ns,
)
from slotc.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "BuildCompleted",
    "BuildEvent",
    "Diagnostic",
    "EventLog",
    "RebuildTriggered",
    "SlotcEvent",
    "now_ns",
]
