"""Compile layer — layout schema, page normalization, slot merging.

Turns a layout and a page into merged output:
extract the schema, normalize the page against it, merge its providers
into a fresh copy of the layout.
"""

from slotc.compile.merger import merge_page
from slotc.compile.normalizer import NormalizeResult, Provider, normalize_page
from slotc.compile.schema import LayoutSchema, SlotSpec, extract_schema

__all__ = [
    "LayoutSchema",
    "NormalizeResult",
    "Provider",
    "SlotSpec",
    "extract_schema",
    "merge_page",
    "normalize_page",
]
