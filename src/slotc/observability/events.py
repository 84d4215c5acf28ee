"""Event model for build observability.

Every build anomaly and action is recorded as a frozen dataclass with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.
    Watch-mode rebuilds run on timer threads and record into the same log.

"""

import time
from dataclasses import dataclass
from typing import Literal, TypeAlias

from slotc._types import DiagnosticLevel


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A classified anomaly found during a build pass.

    Attributes:
        level: Classification tag (error, warning, auto-add, normalized).
        message: Human-readable description.
        path: File the diagnostic concerns (empty for build-wide ones).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    level: DiagnosticLevel
    message: str
    path: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class BuildEvent:
    """A file was produced (or confirmed up to date) by a build pass.

    Attributes:
        kind: The type of build action.
        source: Source file path.
        target: Output file path.
        duration_ms: Time taken in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["build_page", "unchanged_page", "copy_asset"]
    source: str
    target: str
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class BuildCompleted:
    """A build pass finished.

    Attributes:
        ok: Aggregate success of the pass.
        pages_built: Pages written or confirmed unchanged.
        pages_failed: Pages skipped because of a violation or error.
        assets_copied: Asset files copied.
        duration_ms: Wall-clock time of the pass.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    ok: bool
    pages_built: int
    pages_failed: int
    assets_copied: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RebuildTriggered:
    """The watch-mode debounce window elapsed and a rebuild started.

    Attributes:
        changed_paths: Paths recorded since the previous rebuild.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    changed_paths: tuple[str, ...]
    timestamp_ns: int


SlotcEvent: TypeAlias = Diagnostic | BuildEvent | BuildCompleted | RebuildTriggered


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
