"""Slotc — a schema-enforcing static HTML compiler.

One layout declares named, ordered slots; every page supplies a provider
element per slot.  Slotc normalizes each page against the layout (adding
missing providers, fixing their order, rejecting unknown ones), merges the
providers into a copy of the layout, and mirrors non-HTML assets.

Quick start::

    import slotc

    result = slotc.build("src", "dist")
    assert result.ok

Two modes::

    slotc.build("src", "dist")     # One build pass
    slotc.watch("src", "dist")     # Build, then rebuild on changes

Layout::

    <head><title slot="title" slot-mode="text"></title></head>
    <body><main slot="content"></main></body>

Page::

    <head><title for-slot="title">Docs</title></head>
    <body><section for-slot="content"><p>Hi</p></section></body>

"""

__version__ = "0.1.0"
__all__ = [
    "SlotcConfig",
    "__version__",
    "build",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import slotc`` fast (no BeautifulSoup / watchfiles import).
    """
    if name == "SlotcConfig":
        from slotc.config import SlotcConfig

        return SlotcConfig

    if name == "build":
        from slotc.app import build

        return build

    if name == "watch":
        from slotc.app import watch

        return watch

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
