"""Build collector — records build events and echoes them to stderr.

Every anomaly is recorded as a ``Diagnostic`` carrying its classification
tag and printed with a matching prefix:

    [Error]       schema violation, parse/merge failure, I/O failure
    [Warn]        non-fatal layout or build condition
    [AutoAdd]     a missing provider was synthesized
    [Normalized]  a page was rewritten to canonical provider order

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Printing is guarded by a lock so lines from a watch-mode rebuild
    never interleave.

"""

from __future__ import annotations

import sys
import threading
import time

from slotc._types import DiagnosticLevel
from slotc.banner import _CYAN, _DIM, _GREEN, _MAGENTA, _RED, _YELLOW, styled
from slotc.observability.events import (
    BuildCompleted,
    BuildEvent,
    Diagnostic,
    RebuildTriggered,
    now_ns,
)
from slotc.observability.log import EventLog

_TAGS: dict[str, tuple[str, str]] = {
    "error": ("[Error]", _RED),
    "warning": ("[Warn]", _YELLOW),
    "auto-add": ("[AutoAdd]", _CYAN),
    "normalized": ("[Normalized]", _MAGENTA),
}


class BuildCollector:
    """Event collector for build passes.

    Args:
        log: The EventLog to store events in.
        echo: Print human-readable lines to stderr as events arrive.

    """

    __slots__ = ("_echo", "_log", "_print_lock")

    def __init__(self, log: EventLog | None = None, *, echo: bool = True) -> None:
        self._log = log if log is not None else EventLog()
        self._echo = echo
        self._print_lock = threading.Lock()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def _print(self, line: str) -> None:
        if not self._echo:
            return
        with self._print_lock:
            print(line, file=sys.stderr)

    # ----- Diagnostics -----

    def report(self, level: DiagnosticLevel, message: str, *, path: str = "") -> None:
        """Record a classified anomaly."""
        self._log.append(
            Diagnostic(level=level, message=message, path=path, timestamp_ns=now_ns())
        )
        label, color = _TAGS[level]
        self._print(f"{styled(label, color)} {message}")

    def error(self, message: str, *, path: str = "") -> None:
        self.report("error", message, path=path)

    def warning(self, message: str, *, path: str = "") -> None:
        self.report("warning", message, path=path)

    # ----- Build events -----

    def record_start(self) -> None:
        """Announce the start of a build pass."""
        self._print(f"{styled('[Build]', _DIM)} {time.strftime('%H:%M:%S')}")

    def record_build(
        self,
        kind: str,
        source: str,
        target: str,
        *,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a build action (page written, page unchanged, asset copied)."""
        self._log.append(
            BuildEvent(
                kind=kind,  # type: ignore[arg-type]
                source=source,
                target=target,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
        if kind == "build_page":
            self._print(f"{styled('✔', _GREEN)} Built {source}")
        elif kind == "unchanged_page":
            self._print(f"{styled('-', _DIM)} Built {source} (unchanged)")
        elif kind == "copy_asset":
            self._print(f"📁 Copied {source}")

    def record_complete(
        self,
        *,
        ok: bool,
        pages_built: int,
        pages_failed: int,
        assets_copied: int,
        duration_ms: float,
    ) -> None:
        """Record the end of a build pass."""
        self._log.append(
            BuildCompleted(
                ok=ok,
                pages_built=pages_built,
                pages_failed=pages_failed,
                assets_copied=assets_copied,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
        status = "" if ok else f" {styled('with errors', _RED)}"
        self._print(
            f"{styled('[Build]', _DIM)} Complete in {duration_ms:,.0f} ms{status}.\n"
        )

    # ----- Watch events -----

    def record_rebuild(self, changed_paths: tuple[str, ...]) -> None:
        """Record a debounced watch-mode rebuild."""
        self._log.append(
            RebuildTriggered(changed_paths=changed_paths, timestamp_ns=now_ns())
        )
        count = len(changed_paths)
        label = "change" if count == 1 else "changes"
        self._print(f"{styled('[Watch]', _DIM)} {count} {label} detected, rebuilding")
