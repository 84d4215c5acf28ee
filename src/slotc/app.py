"""Slotc application — the public build and watch entry points.

Both functions resolve configuration (config file + keyword overrides),
verify that the source directory and layout exist, and drive a
``SiteCompiler``.  ``watch`` then keeps rebuilding on source changes until
the process is interrupted.
"""

import sys
import threading
from pathlib import Path

from slotc._errors import ConfigError
from slotc.banner import print_banner
from slotc.config import SlotcConfig
from slotc.config_loader import load_config
from slotc.export.site import BuildResult, SiteCompiler
from slotc.observability.log import EventLog


def _resolve_config(
    source: str | Path | None,
    output: str | Path | None,
    project_root: str | Path | None,
    overrides: dict[str, object],
) -> SlotcConfig:
    """Load config and check the startup preconditions.

    Raises:
        ConfigError: If the source directory or the layout file is missing.

    """
    root = Path(project_root) if project_root is not None else Path.cwd()
    config = load_config(root, source=source, output=output, **overrides)

    if not config.source.is_dir():
        msg = f"Source directory not found: {config.source}"
        raise ConfigError(msg)
    if not config.layout_path.is_file():
        msg = f"Missing {config.layout_path}"
        raise ConfigError(msg)
    return config


def build(
    source: str | Path | None = None,
    output: str | Path | None = None,
    *,
    project_root: str | Path | None = None,
    **kwargs: object,
) -> BuildResult:
    """Run a single build pass.

    Args:
        source: Source directory (default ``src``, or the config file's).
        output: Output directory (default ``dist``, or the config file's).
        project_root: Where to look for ``slotc.yaml`` / ``slotc.toml``;
            defaults to the current working directory.
        **kwargs: Override SlotcConfig fields.

    Raises:
        ConfigError: If the source directory or the layout file is missing.

    """
    config = _resolve_config(source, output, project_root, kwargs)
    compiler = SiteCompiler(config)

    if config.verbose:
        print_banner(config, len(compiler.page_paths()), mode="build")

    result = compiler.build_once()

    if config.verbose:
        _print_build_summary(result, compiler.collector.log)
    return result


def watch(
    source: str | Path | None = None,
    output: str | Path | None = None,
    *,
    project_root: str | Path | None = None,
    **kwargs: object,
) -> BuildResult:
    """Build once, then rebuild on every debounced source change.

    Blocks until interrupted (Ctrl-C).  Returns the result of the initial
    build pass so the caller can still report it.

    Raises:
        ConfigError: If the source directory or the layout file is missing.

    """
    from slotc.rebuild.scheduler import ChangeScheduler
    from slotc.rebuild.watcher import SourceWatcher

    config = _resolve_config(source, output, project_root, kwargs)
    compiler = SiteCompiler(config)
    collector = compiler.collector

    if config.verbose:
        print_banner(config, len(compiler.page_paths()), mode="watch")

    initial = compiler.build_once()

    def rebuild(paths: frozenset[Path]) -> None:
        collector.record_rebuild(tuple(sorted(str(p) for p in paths)))
        compiler.build_once(paths)

    def report_failure(exc: Exception) -> None:
        collector.error(f"Rebuild failed: {exc}")

    scheduler = ChangeScheduler(
        rebuild,
        quiet_seconds=config.debounce_seconds,
        ignore_suffixes=config.ignore_suffixes,
        on_error=report_failure,
    )
    watcher = SourceWatcher(config, scheduler)
    watcher.start()

    try:
        _wait_forever()
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
        scheduler.stop()

    return initial


def _wait_forever() -> None:
    """Block the calling thread until the process is interrupted."""
    threading.Event().wait()


def _print_build_summary(result: BuildResult, log: EventLog) -> None:
    """Print build completion summary to stderr."""
    lines = [
        "─" * 41,
        f"  Built {result.total_pages} page{'s' if result.total_pages != 1 else ''}",
    ]
    if result.total_assets > 0:
        lines.append(
            f"  Copied {result.total_assets} asset{'s' if result.total_assets != 1 else ''}"
        )
    failed = result.failed_pages
    if failed:
        lines.append(f"  Failed: {', '.join(p.name for p in failed)}")
    errors = len(log.diagnostics("error"))
    warnings = len(log.diagnostics("warning"))
    if errors or warnings:
        lines.append(
            f"  {errors} error{'s' if errors != 1 else ''}, "
            f"{warnings} warning{'s' if warnings != 1 else ''}"
        )
    lines.append(f"  Output: {result.output_dir}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)
