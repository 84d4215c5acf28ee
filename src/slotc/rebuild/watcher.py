"""Source watcher — feeds filesystem changes into the change scheduler.

Runs watchfiles in a background thread over the whole source tree and
forwards every relevant change to a ``ChangeScheduler``, which owns the
debounce window and the rebuild.  Changes inside the output directory are
dropped so that a build writing into a nested output dir does not retrigger
itself.

watchfiles reports a rename as a ``deleted`` change for the old path plus
an ``added`` change for the new one, so renames arrive here as two
``notify`` calls.  ``ChangeScheduler.notify_rename`` serves event sources
that report renames without paths.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

if TYPE_CHECKING:
    from slotc.config import SlotcConfig
    from slotc.rebuild.scheduler import ChangeScheduler

# watchfiles already batches raw events; keep its window short so the
# scheduler's quiet interval dominates.
_WATCH_DEBOUNCE_MS = 50
_WATCH_STEP_MS = 50


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def is_relevant(path: Path, config: SlotcConfig) -> bool:
    """True for paths inside the source tree and outside the output tree."""
    if config.in_output(path):
        return False
    try:
        path.relative_to(config.source)
    except ValueError:
        return False
    return True


class SourceWatcher:
    """Watches the source directory and notifies a scheduler of changes.

    Args:
        config: Frozen slotc configuration.
        scheduler: Receives one ``notify`` per relevant changed path.

    """

    def __init__(self, config: SlotcConfig, scheduler: ChangeScheduler) -> None:
        self._config = config
        self._scheduler = scheduler
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching for file changes in a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="slotc-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def dispatch(self, raw_changes: Iterable[tuple[Change, str]]) -> list[ChangeEvent]:
        """Forward one watchfiles batch to the scheduler.

        Returns the events that were accepted by the scheduler.

        """
        accepted: list[ChangeEvent] = []
        for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
            path = Path(path_str)
            if not is_relevant(path, self._config):
                continue
            kind = _CHANGE_KIND_MAP.get(change_type, "modified")
            if self._scheduler.notify(path):
                accepted.append(ChangeEvent(path=path, kind=kind))
        return accepted

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and dispatch each batch."""
        from watchfiles import watch

        for raw_changes in watch(
            self._config.source,
            stop_event=self._stop_event,
            debounce=_WATCH_DEBOUNCE_MS,
            step=_WATCH_STEP_MS,
        ):
            self.dispatch(raw_changes)
