"""Shared test fixtures for slotc."""

from __future__ import annotations

from pathlib import Path

import pytest

from slotc.config import SlotcConfig

LAYOUT = """<!DOCTYPE html>
<html>
<head><title slot="title" slot-mode="text"></title></head>
<body><main slot="content"></main></body>
</html>
"""

PAGE = """<!DOCTYPE html>
<html>
<head><title for-slot="title">Docs</title></head>
<body><section for-slot="content"><p>Hi</p></section></body>
</html>
"""


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create a minimal source tree for testing.

    Returns the path to ``src/`` holding a two-slot layout, one complete
    page, and a nested stylesheet.
    """
    src = tmp_path / "src"
    src.mkdir()
    (src / "_layout.html").write_text(LAYOUT)
    (src / "index.html").write_text(PAGE)

    css = src / "css"
    css.mkdir()
    (css / "style.css").write_text("body { margin: 0; }\n")

    return src


@pytest.fixture
def config(tmp_site: Path) -> SlotcConfig:
    """A quiet SlotcConfig building ``tmp_site`` into a sibling ``dist/``."""
    return SlotcConfig(
        source=tmp_site,
        output=tmp_site.parent / "dist",
        verbose=False,
    )

