"""Rebuild layer — debounced rebuilds on source changes.

The watcher turns filesystem events into scheduler notifications; the
scheduler coalesces bursts and runs one serialized rebuild per quiet
window.
"""

from slotc.rebuild.scheduler import ChangeScheduler
from slotc.rebuild.watcher import ChangeEvent, SourceWatcher

__all__ = ["ChangeEvent", "ChangeScheduler", "SourceWatcher"]
