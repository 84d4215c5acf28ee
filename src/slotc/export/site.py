"""Site compiler — one build pass over a source directory.

Composes the compile layer and the asset synchronizer:

    1. Read and parse the layout, extract the slot schema
    2. For each top-level page (sorted by file name):
       normalize → persist if changed → merge if no extras → write output
    3. Mirror non-HTML assets
    4. Aggregate success across pages

A page-level failure (unknown providers, unreadable markup, a missing
attribute in an ``attr:`` slot, a failed write) is reported and marks the
pass as failed; the remaining pages are still processed.

Watch-mode passes receive the changed paths and rebuild only the changed
pages unless a deletion, a layout edit, or a page without output forces a
full pass.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from slotc._errors import DocumentError, ExportError, LayoutError, MergeError
from slotc.compile.merger import merge_page
from slotc.compile.normalizer import normalize_page
from slotc.compile.schema import LayoutSchema, extract_schema
from slotc.dom import HtmlDocument
from slotc.observability.collector import BuildCollector

if TYPE_CHECKING:
    from collections.abc import Iterable

    from slotc.compile.normalizer import NormalizeResult
    from slotc.config import SlotcConfig
    from slotc.export.assets import SyncResult


@dataclass(frozen=True, slots=True)
class ExportedFile:
    """Record of a single file written during a build pass.

    Attributes:
        source_path: Source path relative to the source directory.
        output_path: Absolute filesystem path to the written file.
        source_type: Category of the exported file.
        size_bytes: Size of the written file in bytes.
        duration_ms: Time taken to produce and write this file.

    """

    source_path: str
    output_path: Path
    source_type: Literal["page", "asset"]
    size_bytes: int
    duration_ms: float


PageStatus: TypeAlias = Literal["built", "unchanged", "skipped", "failed"]


@dataclass(frozen=True, slots=True)
class PageReport:
    """What happened to one page during a build pass.

    Attributes:
        name: Page file name.
        status: ``built`` (output written), ``unchanged`` (output already
            identical), ``skipped`` (nothing to merge), ``failed``.
        normalized: True if the source page was rewritten.
        extras: Unknown provider names found on the page.
        auto_added: Slots that received a synthesized provider.
        error: Failure description, if any.

    """

    name: str
    status: PageStatus
    normalized: bool = False
    extras: tuple[str, ...] = ()
    auto_added: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Aggregate result of one build pass.

    Attributes:
        ok: True if no page failed and the layout was valid.
        pages: Per-page reports in processing order.
        files: Pages written during the pass.
        assets: Asset synchronization result (None if the pass aborted
            before reaching it).
        duration_ms: Total wall-clock time for the pass.
        output_dir: Absolute path to the output directory.
        incremental: True if only the changed pages were rebuilt.

    """

    ok: bool
    pages: tuple[PageReport, ...]
    files: tuple[ExportedFile, ...]
    assets: SyncResult | None
    duration_ms: float
    output_dir: Path
    incremental: bool = False

    @property
    def total_pages(self) -> int:
        return sum(1 for p in self.pages if p.status in ("built", "unchanged"))

    @property
    def failed_pages(self) -> tuple[PageReport, ...]:
        return tuple(p for p in self.pages if not p.ok)

    @property
    def total_assets(self) -> int:
        return len(self.assets.copied) if self.assets is not None else 0


class SiteCompiler:
    """Compiles a source directory into merged pages plus mirrored assets.

    Stateless between passes: the schema is re-extracted from the layout
    every time ``build_once`` runs.

    Args:
        config: Frozen slotc configuration.
        collector: Receives diagnostics and build events.

    """

    def __init__(
        self,
        config: SlotcConfig,
        collector: BuildCollector | None = None,
    ) -> None:
        self._config = config
        self._collector = collector if collector is not None else BuildCollector(
            echo=config.verbose,
        )

    @property
    def config(self) -> SlotcConfig:
        return self._config

    @property
    def collector(self) -> BuildCollector:
        return self._collector

    def page_paths(self) -> list[Path]:
        """Top-level ``*.html`` pages in the source directory, layout excluded."""
        source = self._config.source
        return sorted(
            path
            for path in source.iterdir()
            if path.is_file()
            and path.suffix.lower() == ".html"
            and not self._config.is_layout(path)
        )

    def build_once(self, changed: Iterable[Path] | None = None) -> BuildResult:
        """Run one build pass and return the aggregate result.

        With *changed* (the paths a watcher saw), only the changed top-level
        pages are rebuilt.  The pass falls back to every page when *changed*
        is empty, when a changed path no longer exists, when the layout
        changed, or when a page has no output yet.  Assets are always
        synchronized.

        """
        start = time.perf_counter()
        config = self._config
        collector = self._collector
        collector.record_start()

        incremental = False

        def finish(
            ok: bool,
            pages: list[PageReport],
            files: list[ExportedFile],
            assets: SyncResult | None,
        ) -> BuildResult:
            elapsed = (time.perf_counter() - start) * 1000
            collector.record_complete(
                ok=ok,
                pages_built=sum(1 for p in pages if p.status in ("built", "unchanged")),
                pages_failed=sum(1 for p in pages if not p.ok),
                assets_copied=len(assets.copied) if assets is not None else 0,
                duration_ms=elapsed,
            )
            return BuildResult(
                ok=ok,
                pages=tuple(pages),
                files=tuple(files),
                assets=assets,
                duration_ms=elapsed,
                output_dir=config.output,
                incremental=incremental,
            )

        try:
            config.output.mkdir(parents=True, exist_ok=True)
            layout_text = config.layout_path.read_text(encoding="utf-8")
            page_paths = self.page_paths()
            if changed is not None:
                page_paths, incremental = self._select_pages(page_paths, changed)
        except (OSError, UnicodeDecodeError) as exc:
            collector.error(str(exc))
            return finish(False, [], [], None)

        try:
            schema = self._load_schema(layout_text)
        except (LayoutError, DocumentError) as exc:
            collector.error(str(exc), path=config.layout)
            return finish(False, [], [], None)

        if not schema:
            collector.warning(f"No slots in {config.layout}. Nothing to merge.")

        pages: list[PageReport] = []
        files: list[ExportedFile] = []
        for path in page_paths:
            report, exported = self._build_page(path, schema, layout_text)
            pages.append(report)
            if exported is not None:
                files.append(exported)

        assets = self._sync_assets()
        ok = all(p.ok for p in pages)
        return finish(ok, pages, files, assets)

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _select_pages(
        self,
        page_paths: list[Path],
        changed: Iterable[Path],
    ) -> tuple[list[Path], bool]:
        """Pages to rebuild for *changed*, and whether the pass is incremental."""
        config = self._config
        changed = {Path(path).resolve() for path in changed}
        if not changed:
            return page_paths, False
        if any(_missing(path) or config.is_layout(path) for path in changed):
            return page_paths, False
        if any(not (config.output / path.name).is_file() for path in page_paths):
            return page_paths, False
        return [path for path in page_paths if path in changed], True

    def _load_schema(self, layout_text: str) -> LayoutSchema:
        layout = HtmlDocument.parse(layout_text, name=self._config.layout)
        return extract_schema(
            layout,
            slot_attr=self._config.slot_attr,
            mode_attr=self._config.mode_attr,
        )

    def _build_page(
        self,
        path: Path,
        schema: LayoutSchema,
        layout_text: str,
    ) -> tuple[PageReport, ExportedFile | None]:
        """Normalize, persist, merge, and write a single page."""
        config = self._config
        collector = self._collector
        name = path.name
        t0 = time.perf_counter()

        try:
            page = HtmlDocument.load(path)
        except DocumentError as exc:
            collector.error(str(exc), path=name)
            return PageReport(name=name, status="failed", error=str(exc)), None

        result = normalize_page(page, schema, provider_attr=config.provider_attr)

        for slot in result.auto_added:
            collector.report("auto-add", f"{name}: inserted missing slot '{slot}'", path=name)

        if result.extras:
            collector.error(
                f"{name} has unknown slots: {', '.join(result.extras)}", path=name,
            )

        if result.changed:
            try:
                self._write_text(path, result.document.serialize())
            except ExportError as exc:
                msg = str(exc)
                collector.error(msg, path=name)
                return self._failed(name, result, msg), None
            collector.report("normalized", f"Updated {name}", path=name)

        if not result.mergeable:
            return self._failed(name, result, "unknown slots"), None

        if not schema:
            return PageReport(
                name=name,
                status="skipped",
                normalized=result.changed,
                auto_added=result.auto_added,
            ), None

        try:
            output = merge_page(
                HtmlDocument.parse(layout_text, name=config.layout),
                schema,
                result.providers,
                slot_attr=config.slot_attr,
                mode_attr=config.mode_attr,
                strip_slot_attributes=config.strip_slot_attributes,
            )
        except (MergeError, DocumentError) as exc:
            msg = f"{name}: {exc}"
            collector.error(msg, path=name)
            return self._failed(name, result, msg), None

        dest = config.output / name
        html = output.serialize()
        try:
            written = self._write_if_changed(dest, html)
        except ExportError as exc:
            msg = str(exc)
            collector.error(msg, path=name)
            return self._failed(name, result, msg), None

        elapsed = (time.perf_counter() - t0) * 1000
        collector.record_build(
            "build_page" if written else "unchanged_page",
            name,
            str(dest),
            duration_ms=elapsed,
        )
        report = PageReport(
            name=name,
            status="built" if written else "unchanged",
            normalized=result.changed,
            auto_added=result.auto_added,
        )
        exported = None
        if written:
            exported = ExportedFile(
                source_path=name,
                output_path=dest,
                source_type="page",
                size_bytes=len(html.encode("utf-8")),
                duration_ms=elapsed,
            )
        return report, exported

    def _sync_assets(self) -> SyncResult:
        from slotc.export.assets import sync_assets

        config = self._config
        result = sync_assets(config.source, config.output, layout=config.layout)
        for copied in result.copied:
            self._collector.record_build(
                "copy_asset",
                copied.source_path,
                str(copied.output_path),
                duration_ms=copied.duration_ms,
            )
        for relative, message in result.failed:
            self._collector.error(f"Failed to copy {relative}: {message}", path=relative)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _failed(name: str, result: NormalizeResult, error: str) -> PageReport:
        return PageReport(
            name=name,
            status="failed",
            normalized=result.changed,
            extras=result.extras,
            auto_added=result.auto_added,
            error=error,
        )

    @staticmethod
    def _write_text(filepath: Path, text: str) -> None:
        try:
            filepath.write_bytes(text.encode("utf-8"))
        except OSError as exc:
            msg = f"Failed to write {filepath}: {exc}"
            raise ExportError(msg) from exc

    @staticmethod
    def _write_if_changed(filepath: Path, text: str) -> bool:
        """Write *text* unless the file already holds exactly that.

        Returns True if the file was written.

        Raises:
            ExportError: If the file cannot be read or written.

        """
        data = text.encode("utf-8")
        try:
            if filepath.is_file() and filepath.read_bytes() == data:
                return False
            filepath.parent.mkdir(parents=True, exist_ok=True)
            filepath.write_bytes(data)
        except OSError as exc:
            msg = f"Failed to write {filepath}: {exc}"
            raise ExportError(msg) from exc
        return True


def _missing(path: Path, *, retries: int = 3, delay: float = 0.01) -> bool:
    """True if *path* stays absent across a few short retries.

    Editors that save by rename briefly leave the path missing.
    """
    if path.exists():
        return False
    for _ in range(retries):
        time.sleep(delay)
        if path.exists():
            return False
    return True
