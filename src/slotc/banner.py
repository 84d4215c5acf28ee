"""Startup banner and terminal styling.

Prints a short status banner before the first build pass and provides the
ANSI helpers used by the build collector.  Detects ``NO_COLOR`` / ``TERM``
for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slotc._types import SlotcMode
    from slotc.config import SlotcConfig


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_MAGENTA = "\033[35m" if _COLOR else ""


def styled(text: str, *styles: str) -> str:
    """Wrap *text* in the given ANSI styles (no-op without color support)."""
    if not styles or not _COLOR:
        return text
    return f"{''.join(styles)}{text}{_RESET}"


# ---------------------------------------------------------------------------
# Mode badges
# ---------------------------------------------------------------------------

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "build": (_YELLOW, "build"),
    "watch": (_GREEN, "watch"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: SlotcConfig,
    page_count: int,
    mode: SlotcMode,
    *,
    warnings: list[str] | None = None,
) -> None:
    """Print the slotc startup banner to stderr.

    Args:
        config: Resolved SlotcConfig.
        page_count: Number of pages found in the source directory.
        mode: ``"build"`` or ``"watch"``.
        warnings: Optional list of warning messages to display.

    """
    from slotc import __version__

    badge = _mode_badge(mode)
    header = f"  {_BOLD}slotc{_RESET} {_DIM}v{__version__}{_RESET}  {badge}"

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    pages_label = "page" if page_count == 1 else "pages"
    lines.append(f"  {_DIM}├─{_RESET} {page_count} {pages_label} found")
    lines.append(f"  {_DIM}├─{_RESET} layout: {_DIM}{config.layout_path}{_RESET}")
    lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.output}{_RESET}")

    if mode == "watch":
        lines.append("")
        lines.append(
            f"  {_DIM}Watching for changes "
            f"(debounce {config.debounce_ms}ms)...{_RESET}"
        )

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
