"""Asset handling — mirror non-HTML source files into the output directory.

Walks the whole source tree (subdirectories included) and copies every
file that is not HTML and not the layout, preserving directory structure.
A file is copied only when the destination is missing or its SHA-256
content digest differs from the source's.  Modification times are never
consulted; sizes are used only to short-circuit "definitely different".

Orphaned files in the output directory are left alone.
"""

from __future__ import annotations

import hashlib
import shutil
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from slotc.export.site import ExportedFile

_HTML_SUFFIXES = (".html",)
_DIGEST = "sha256"


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one asset synchronization pass.

    Attributes:
        copied: Files copied because they were missing or different.
        unchanged: Number of files whose destination already matched.
        failed: ``(relative path, error message)`` for files that could
            not be hashed or copied.

    """

    copied: tuple[ExportedFile, ...]
    unchanged: int
    failed: tuple[tuple[str, str], ...]


def file_digest(path: Path) -> str:
    """Hex SHA-256 digest of a file's full contents."""
    with path.open("rb") as fh:
        return hashlib.file_digest(fh, _DIGEST).hexdigest()


def files_identical(a: Path, b: Path) -> bool:
    """True if *a* and *b* have byte-identical contents.

    Different sizes mean different content; equal sizes always fall
    through to a full-content digest comparison.
    """
    if a.stat().st_size != b.stat().st_size:
        return False
    return file_digest(a) == file_digest(b)


def iter_assets(
    source: Path,
    *,
    layout: str = "_layout.html",
    exclude: Path | None = None,
) -> Iterator[Path]:
    """Yield asset files under *source* in sorted order.

    Skips ``.html`` files (any case), the layout document, and everything
    under *exclude* (the output directory when it lives inside *source*).
    """
    for path in sorted(source.rglob("*")):
        if not path.is_file():
            continue
        if path.suffix.lower() in _HTML_SUFFIXES:
            continue
        if path.parent == source and path.name.lower() == layout.lower():
            continue
        if exclude is not None and (path == exclude or exclude in path.parents):
            continue
        yield path


def sync_assets(
    source: Path,
    output: Path,
    *,
    layout: str = "_layout.html",
) -> SyncResult:
    """Mirror non-HTML files from *source* into *output*.

    Per-file I/O failures are collected in ``SyncResult.failed`` and do
    not stop the walk.

    """
    copied: list[ExportedFile] = []
    failed: list[tuple[str, str]] = []
    unchanged = 0

    for src_file in iter_assets(source, layout=layout, exclude=output):
        t0 = time.perf_counter()
        relative = src_file.relative_to(source)
        dest_file = output / relative

        try:
            if dest_file.is_file() and files_identical(src_file, dest_file):
                unchanged += 1
                continue
            dest_file.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src_file, dest_file)
            size = dest_file.stat().st_size
        except OSError as exc:
            failed.append((relative.as_posix(), str(exc)))
            continue

        elapsed = (time.perf_counter() - t0) * 1000
        copied.append(ExportedFile(
            source_path=relative.as_posix(),
            output_path=dest_file,
            source_type="asset",
            size_bytes=size,
            duration_ms=elapsed,
        ))

    return SyncResult(copied=tuple(copied), unchanged=unchanged, failed=tuple(failed))
