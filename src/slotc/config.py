"""Slotc configuration.

SlotcConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SlotcConfig:
    """Configuration for a slotc build.

    Attributes:
        source: Source directory holding the layout, pages and assets.
            Always resolved to an absolute path on construction.
        output: Output directory for merged pages and mirrored assets.
            Always resolved to an absolute path on construction.
        layout: File name of the layout document inside ``source``.
        slot_attr: Attribute that declares a slot in the layout.
        mode_attr: Attribute that selects a slot's merge mode in the layout.
        provider_attr: Attribute that tags a page element as a slot provider.
        debounce_ms: Quiet interval before a watch-mode rebuild fires.
        ignore_suffixes: Path suffixes of transient writes ignored by watch mode.
        strip_slot_attributes: Remove ``slot_attr`` / ``mode_attr`` from
            merged output.
        verbose: Print build progress and diagnostics to stderr.

    """

    source: Path = field(default_factory=lambda: Path("src"))
    output: Path = field(default_factory=lambda: Path("dist"))
    layout: str = "_layout.html"
    slot_attr: str = "slot"
    mode_attr: str = "slot-mode"
    provider_attr: str = "for-slot"
    debounce_ms: int = 150
    ignore_suffixes: tuple[str, ...] = (".tmp",)
    strip_slot_attributes: bool = True
    verbose: bool = True

    def __post_init__(self) -> None:
        # Resolve to absolute so that watchfiles (which returns absolute
        # paths) can be compared via Path.relative_to().
        if not self.source.is_absolute():
            object.__setattr__(self, "source", self.source.resolve())
        if not self.output.is_absolute():
            object.__setattr__(self, "output", self.output.resolve())

    @property
    def layout_path(self) -> Path:
        """Absolute path to the layout document."""
        return self.source / self.layout

    @property
    def debounce_seconds(self) -> float:
        """Debounce interval in seconds, as expected by ``threading.Timer``."""
        return self.debounce_ms / 1000

    def is_layout(self, path: Path) -> bool:
        """Whether *path* is the layout document (name match is case-insensitive)."""
        return path.parent == self.source and path.name.lower() == self.layout.lower()

    def in_output(self, path: Path) -> bool:
        """Whether *path* lies inside the output directory."""
        return path == self.output or self.output in path.parents
