"""Slotc error hierarchy.

All slotc-specific errors inherit from SlotcError for easy catching.
"""


class SlotcError(Exception):
    """Base error for all slotc operations."""


class ConfigError(SlotcError):
    """Invalid or missing configuration (source dir, layout file, config file)."""


class LayoutError(SlotcError):
    """The layout declares an invalid slot schema."""


class DocumentError(SlotcError):
    """An HTML document could not be read or parsed."""


class MergeError(SlotcError):
    """A page's providers could not be merged into the layout."""


class ExportError(SlotcError):
    """Error while writing build output."""
