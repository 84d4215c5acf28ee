"""Tests for slotc.rebuild.scheduler — debounced, serialized rebuilds."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

import pytest

from slotc.rebuild.scheduler import ChangeScheduler


class FakeTimer:
    """A manually fired stand-in for ``threading.Timer``."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function()


class FakeClock:
    """Timer factory that remembers every timer it built."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def calls() -> list[frozenset[Path]]:
    return []


@pytest.fixture
def scheduler(clock: FakeClock, calls: list[frozenset[Path]]) -> ChangeScheduler:
    return ChangeScheduler(calls.append, quiet_seconds=0.15, timer_factory=clock)


# ---------------------------------------------------------------------------
# Debouncing
# ---------------------------------------------------------------------------


class TestDebounce:
    def test_starts_idle(self, scheduler: ChangeScheduler) -> None:
        assert scheduler.state == "idle"
        assert scheduler.pending == frozenset()

    def test_event_arms_a_daemon_timer(
        self, scheduler: ChangeScheduler, clock: FakeClock,
    ) -> None:
        assert scheduler.notify(Path("src/index.html"))
        assert scheduler.state == "pending"
        assert clock.last.started
        assert clock.last.daemon
        assert clock.last.interval == 0.15

    def test_burst_coalesces_into_one_rebuild(
        self,
        scheduler: ChangeScheduler,
        clock: FakeClock,
        calls: list[frozenset[Path]],
    ) -> None:
        for name in ("a.html", "b.html", "a.html"):
            scheduler.notify(Path(name))

        assert len(clock.timers) == 3
        assert [t.cancelled for t in clock.timers] == [True, True, False]

        clock.last.fire()

        assert calls == [frozenset({Path("a.html"), Path("b.html")})]
        assert scheduler.state == "idle"
        assert scheduler.pending == frozenset()

    def test_stale_timer_is_ignored(
        self,
        scheduler: ChangeScheduler,
        clock: FakeClock,
        calls: list[frozenset[Path]],
    ) -> None:
        scheduler.notify(Path("a.html"))
        first = clock.last
        scheduler.notify(Path("b.html"))

        first.fire()

        assert calls == []
        assert scheduler.state == "pending"

    def test_events_after_a_rebuild_start_a_new_window(
        self,
        scheduler: ChangeScheduler,
        clock: FakeClock,
        calls: list[frozenset[Path]],
    ) -> None:
        scheduler.notify(Path("a.html"))
        clock.last.fire()
        scheduler.notify(Path("b.html"))
        clock.last.fire()
        assert calls == [frozenset({Path("a.html")}), frozenset({Path("b.html")})]


class TestQualifyingEvents:
    @pytest.mark.parametrize("name", ["page.html.tmp", "draft.TMP", "x.Tmp"])
    def test_transient_writes_are_ignored(
        self, scheduler: ChangeScheduler, clock: FakeClock, name: str,
    ) -> None:
        assert not scheduler.notify(Path(name))
        assert clock.timers == []
        assert scheduler.state == "idle"

    def test_custom_suffixes(self, clock: FakeClock) -> None:
        scheduler = ChangeScheduler(
            lambda paths: None, ignore_suffixes=(".swp", "~"), timer_factory=clock,
        )
        assert not scheduler.notify(Path(".index.html.swp"))
        assert not scheduler.notify(Path("index.html~"))
        assert scheduler.notify(Path("page.tmp"))

    def test_rename_rearms_without_a_path(
        self,
        scheduler: ChangeScheduler,
        clock: FakeClock,
        calls: list[frozenset[Path]],
    ) -> None:
        scheduler.notify_rename()
        assert scheduler.state == "pending"
        clock.last.fire()
        assert calls == [frozenset()]


# ---------------------------------------------------------------------------
# Errors and shutdown
# ---------------------------------------------------------------------------


class TestErrors:
    def test_on_error_receives_exception(self, clock: FakeClock) -> None:
        errors: list[Exception] = []

        def boom(paths: frozenset[Path]) -> None:
            raise RuntimeError("layout vanished")

        scheduler = ChangeScheduler(boom, timer_factory=clock, on_error=errors.append)
        scheduler.notify(Path("a.html"))
        clock.last.fire()

        assert [str(e) for e in errors] == ["layout vanished"]
        assert not scheduler.is_building

        # The scheduler keeps working after a failed rebuild.
        assert scheduler.notify(Path("b.html"))
        assert scheduler.state == "pending"

    def test_exception_propagates_without_handler(self, clock: FakeClock) -> None:
        def boom(paths: frozenset[Path]) -> None:
            raise RuntimeError("boom")

        scheduler = ChangeScheduler(boom, timer_factory=clock)
        scheduler.notify(Path("a.html"))
        with pytest.raises(RuntimeError, match="boom"):
            clock.last.fire()


class TestStop:
    def test_stop_cancels_armed_timer(
        self,
        scheduler: ChangeScheduler,
        clock: FakeClock,
        calls: list[frozenset[Path]],
    ) -> None:
        scheduler.notify(Path("a.html"))
        scheduler.stop()

        assert clock.last.cancelled
        assert scheduler.state == "idle"
        clock.last.fire()
        assert calls == []

    def test_notifications_after_stop_are_dropped(
        self, scheduler: ChangeScheduler, clock: FakeClock,
    ) -> None:
        scheduler.stop()
        assert not scheduler.notify(Path("a.html"))
        scheduler.notify_rename()
        assert clock.timers == []


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


class BlockingRebuild:
    """A rebuild callback that holds each run open until released."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self.seen: list[frozenset[Path]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, paths: frozenset[Path]) -> None:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        self.seen.append(paths)
        self.started.set()
        self.release.wait(timeout=5)
        with self._lock:
            self.active -= 1


class TestSerializedRebuilds:
    def test_events_during_a_build_queue_one_rerun(self, clock: FakeClock) -> None:
        rebuild = BlockingRebuild()
        scheduler = ChangeScheduler(rebuild, timer_factory=clock)

        scheduler.notify(Path("a.html"))
        first = threading.Thread(target=clock.last.fire)
        first.start()
        assert rebuild.started.wait(timeout=5)
        assert scheduler.is_building

        # Timers firing mid-build return at once and leave a rerun behind.
        for name in ("b.html", "c.html"):
            scheduler.notify(Path(name))
            fired = threading.Thread(target=clock.last.fire)
            fired.start()
            fired.join(timeout=5)
            assert not fired.is_alive()
        assert scheduler.state == "pending"

        rebuild.release.set()
        first.join(timeout=5)

        assert not first.is_alive()
        assert rebuild.max_active == 1
        assert rebuild.seen == [
            frozenset({Path("a.html")}),
            frozenset({Path("b.html"), Path("c.html")}),
        ]
        assert not scheduler.is_building
        assert scheduler.state == "idle"

    def test_stop_during_a_build_drops_the_rerun(self, clock: FakeClock) -> None:
        rebuild = BlockingRebuild()
        scheduler = ChangeScheduler(rebuild, timer_factory=clock)

        scheduler.notify(Path("a.html"))
        first = threading.Thread(target=clock.last.fire)
        first.start()
        assert rebuild.started.wait(timeout=5)

        scheduler.notify(Path("b.html"))
        clock.last.fire()
        scheduler.stop()

        rebuild.release.set()
        first.join(timeout=5)

        assert rebuild.seen == [frozenset({Path("a.html")})]
        assert not scheduler.is_building
        assert scheduler.state == "idle"

    def test_failed_rerun_still_clears_building(self, clock: FakeClock) -> None:
        errors: list[Exception] = []
        runs: list[frozenset[Path]] = []

        def rebuild(paths: frozenset[Path]) -> None:
            runs.append(paths)
            if len(runs) == 1:
                scheduler.notify(Path("b.html"))
                clock.last.fire()
            raise RuntimeError(f"run {len(runs)}")

        scheduler = ChangeScheduler(rebuild, timer_factory=clock, on_error=errors.append)
        scheduler.notify(Path("a.html"))
        clock.last.fire()

        assert runs == [frozenset({Path("a.html")}), frozenset({Path("b.html")})]
        assert [str(e) for e in errors] == ["run 1", "run 2"]
        assert not scheduler.is_building
