"""Slot merger — substitute provider content into a layout clone."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from slotc._errors import MergeError
from slotc.dom import (
    get_attr,
    get_text,
    inner_html,
    remove_attr,
    set_attr,
    set_inner_html,
    set_text,
)

if TYPE_CHECKING:
    from bs4 import Tag

    from slotc._types import SlotName
    from slotc.compile.schema import LayoutSchema, SlotSpec
    from slotc.dom import HtmlDocument


def merge_page(
    layout: HtmlDocument,
    schema: LayoutSchema,
    providers: Mapping[SlotName, Tag],
    *,
    slot_attr: str = "slot",
    mode_attr: str = "slot-mode",
    strip_slot_attributes: bool = True,
) -> HtmlDocument:
    """Merge *providers* into *layout* in schema order, mutating *layout*.

    *layout* must be a fresh parse of the layout text; *providers* is the
    canonical map produced by normalization, so every slot has one.

    Modes:
        ``text``: layout text := provider text (markup discarded).
        ``attr:<name>``: copy attribute ``<name>`` from provider to layout.
        ``html``: layout inner markup := provider inner markup.

    Raises:
        MergeError: If a slot has no provider or layout element, or an
            ``attr:`` provider lacks the attribute.

    """
    for spec in schema:
        target = _layout_element(layout, spec, slot_attr)
        provider = providers.get(spec.name)
        if provider is None:
            msg = f"{layout.name}: no provider for slot {spec.name!r}"
            raise MergeError(msg)

        _apply(spec, target, provider)

        if strip_slot_attributes:
            remove_attr(target, slot_attr)
            remove_attr(target, mode_attr)

    return layout


def _layout_element(layout: HtmlDocument, spec: SlotSpec, slot_attr: str) -> Tag:
    matches = layout.elements_where(slot_attr, spec.name)
    if len(matches) != 1:
        msg = (
            f"{layout.name}: expected exactly one element declaring slot "
            f"{spec.name!r}, found {len(matches)}"
        )
        raise MergeError(msg)
    return matches[0]


def _apply(spec: SlotSpec, target: Tag, provider: Tag) -> None:
    attr_name = spec.attr_name
    if attr_name is not None:
        value = get_attr(provider, attr_name)
        if value is None:
            msg = f"slot {spec.name!r} expected attribute {attr_name!r} on its provider"
            raise MergeError(msg)
        set_attr(target, attr_name, value)
    elif spec.mode == "text":
        set_text(target, get_text(provider))
    else:
        set_inner_html(target, inner_html(provider))
