"""Change scheduler — debounce filesystem events into single rebuilds.

Two states:

    idle     no timer armed
    pending  a timer is armed; it fires ``quiet_seconds`` after the most
             recent qualifying event

Every qualifying event records its path and re-arms the one timer, so a
burst of saves produces one rebuild.  When the timer fires, the pending
set is drained and the rebuild action runs exactly once with it.

Rebuilds never overlap and at most one is ever queued: a timer that fires
while a rebuild is running leaves its paths pending and sets a rerun
flag.  The thread already building loops once more and picks up
everything recorded in the meantime.

Thread Safety:
    ``notify`` is called from the watcher thread, timers fire on their own
    threads.  Pending state, the building flag and the rerun flag are
    guarded by ``_lock``; the rebuild action runs without holding it.

"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Literal, Protocol, TypeAlias

RebuildAction: TypeAlias = Callable[[frozenset[Path]], object]
ErrorHandler: TypeAlias = Callable[[Exception], None]


class Timer(Protocol):
    """The slice of ``threading.Timer`` the scheduler relies on."""

    daemon: bool

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory: TypeAlias = Callable[[float, Callable[[], None]], Timer]


def _thread_timer(interval: float, function: Callable[[], None]) -> Timer:
    return threading.Timer(interval, function)


class ChangeScheduler:
    """Debounces change notifications into serialized rebuilds.

    Args:
        rebuild: Called with the drained set of changed paths.
        quiet_seconds: Quiet interval after the last event before rebuilding.
        ignore_suffixes: Path suffixes of transient writes (case-insensitive).
        timer_factory: Builds the debounce timer; ``threading.Timer`` by default.
        on_error: Receives exceptions raised by *rebuild*.  Without one,
            the exception propagates on the timer thread.

    """

    def __init__(
        self,
        rebuild: RebuildAction,
        *,
        quiet_seconds: float = 0.150,
        ignore_suffixes: Iterable[str] = (".tmp",),
        timer_factory: TimerFactory = _thread_timer,
        on_error: ErrorHandler | None = None,
    ) -> None:
        self._rebuild = rebuild
        self._quiet_seconds = quiet_seconds
        self._ignore_suffixes = tuple(s.lower() for s in ignore_suffixes)
        self._timer_factory = timer_factory
        self._on_error = on_error

        self._lock = threading.Lock()
        self._pending: set[Path] = set()
        self._timer: Timer | None = None
        self._generation = 0
        self._stopped = False
        self._building = False
        self._rerun = False

    @property
    def state(self) -> Literal["idle", "pending"]:
        with self._lock:
            return "pending" if self._timer is not None or self._rerun else "idle"

    @property
    def pending(self) -> frozenset[Path]:
        """Paths recorded since the last rebuild."""
        with self._lock:
            return frozenset(self._pending)

    @property
    def is_building(self) -> bool:
        with self._lock:
            return self._building

    def qualifies(self, path: Path) -> bool:
        """False for paths that end in a transient-write suffix."""
        return not str(path).lower().endswith(self._ignore_suffixes)

    def notify(self, path: Path) -> bool:
        """Record a created/modified/deleted path and re-arm the timer.

        Returns False (and does nothing) for non-qualifying paths.

        """
        if not self.qualifies(path):
            return False
        with self._lock:
            if self._stopped:
                return False
            self._pending.add(path)
            self._arm_locked()
        return True

    def notify_rename(self) -> None:
        """Re-arm the timer for a rename, without recording a path."""
        with self._lock:
            if self._stopped:
                return
            self._arm_locked()

    def stop(self) -> None:
        """Cancel any armed timer and ignore further notifications.

        A rebuild already running finishes, but no rerun follows it.

        """
        with self._lock:
            self._stopped = True
            self._generation += 1
            self._rerun = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()

    def _arm_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._generation += 1
        generation = self._generation
        timer = self._timer_factory(self._quiet_seconds, lambda: self._expire(generation))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _expire(self, generation: int) -> None:
        with self._lock:
            # A cancelled timer may still fire if it raced with re-arming.
            if generation != self._generation or self._stopped:
                return
            self._timer = None
            if self._building:
                self._rerun = True
                return
            self._building = True

        try:
            self._drain()
        except BaseException:
            with self._lock:
                self._building = False
                self._rerun = False
            raise

    def _drain(self) -> None:
        """Run rebuilds until no rerun was requested during the last one."""
        while True:
            with self._lock:
                paths = frozenset(self._pending)
                self._pending.clear()
                self._rerun = False

            try:
                self._rebuild(paths)
            except Exception as exc:
                if self._on_error is None:
                    raise
                self._on_error(exc)

            with self._lock:
                if not self._rerun or self._stopped:
                    self._building = False
                    return
