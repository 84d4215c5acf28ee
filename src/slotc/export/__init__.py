"""Export layer — build passes and asset mirroring.

Runs normalization and merging over every page of a source directory,
writes merged pages, and mirrors non-HTML assets by content hash.
"""

from slotc.export.site import BuildResult, ExportedFile, PageReport, SiteCompiler
from slotc.export.assets import SyncResult, sync_assets

__all__ = [
    "BuildResult",
    "ExportedFile",
    "PageReport",
    "SiteCompiler",
    "SyncResult",
    "sync_assets",
]
