"""Layout schema — the ordered slot list a layout declares.

Every element carrying the slot attribute becomes a ``SlotSpec``.  The
schema is rebuilt from the layout text on every build pass and never
mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from slotc._errors import LayoutError
from slotc._types import MergeMode, SlotName
from slotc.dom import HtmlDocument, get_attr, has_ancestor, tag_name

DEFAULT_MODE = "html"
_ATTR_PREFIX = "attr:"


@dataclass(frozen=True, slots=True)
class SlotSpec:
    """One slot declared by the layout.

    Attributes:
        name: Slot name, unique within the layout.
        mode: Merge mode: ``html``, ``text`` or ``attr:<name>``.
        layout_tag: Lowercase tag name of the declaring layout element.
        in_head: True if the declaring element sits under ``<head>``.

    """

    name: SlotName
    mode: MergeMode
    layout_tag: str
    in_head: bool

    @property
    def attr_name(self) -> str | None:
        """Attribute transferred by an ``attr:<name>`` slot, else None."""
        if self.mode.startswith(_ATTR_PREFIX):
            return self.mode[len(_ATTR_PREFIX):]
        return None


@dataclass(frozen=True, slots=True)
class LayoutSchema:
    """Ordered, immutable slot specification list."""

    slots: tuple[SlotSpec, ...] = ()

    def __iter__(self) -> Iterator[SlotSpec]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def __contains__(self, name: object) -> bool:
        return any(spec.name == name for spec in self.slots)

    @property
    def names(self) -> tuple[SlotName, ...]:
        return tuple(spec.name for spec in self.slots)

    def get(self, name: SlotName) -> SlotSpec | None:
        for spec in self.slots:
            if spec.name == name:
                return spec
        return None


def validate_mode(mode: str) -> None:
    """Reject merge modes other than ``html``, ``text`` and ``attr:<name>``.

    Raises:
        LayoutError: If *mode* is not a recognised merge mode.

    """
    if mode in ("html", "text"):
        return
    if mode.startswith(_ATTR_PREFIX):
        if mode[len(_ATTR_PREFIX):].strip():
            return
        msg = f"slot mode {mode!r} names no attribute"
        raise LayoutError(msg)
    msg = f"unknown slot mode {mode!r} (expected html, text or attr:<name>)"
    raise LayoutError(msg)


def extract_schema(
    layout: HtmlDocument,
    *,
    slot_attr: str = "slot",
    mode_attr: str = "slot-mode",
) -> LayoutSchema:
    """Build the slot schema from a parsed layout, in document order.

    Raises:
        LayoutError: On an empty or duplicate slot name, or an invalid mode.

    """
    specs: list[SlotSpec] = []
    seen: set[str] = set()

    for el in layout.elements_with(slot_attr):
        name = get_attr(el, slot_attr) or ""
        if not name.strip():
            msg = f"<{tag_name(el)}> in {layout.name} declares an empty slot name"
            raise LayoutError(msg)
        if name in seen:
            msg = f"slot {name!r} is declared more than once in {layout.name}"
            raise LayoutError(msg)
        seen.add(name)

        mode = get_attr(el, mode_attr) or DEFAULT_MODE
        try:
            validate_mode(mode)
        except LayoutError as exc:
            msg = f"slot {name!r} in {layout.name}: {exc}"
            raise LayoutError(msg) from exc

        specs.append(SlotSpec(
            name=name,
            mode=mode,
            layout_tag=tag_name(el),
            in_head=has_ancestor(el, "head"),
        ))

    return LayoutSchema(slots=tuple(specs))
