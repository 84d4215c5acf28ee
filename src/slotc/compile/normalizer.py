"""Page normalizer — bring a page's providers into canonical shape.

Matches a page's provider elements against the layout schema:

1. Discover providers in document order, first occurrence per name wins.
   Names the schema does not declare are collected as extras.
2. Synthesize an empty provider for every slot the page lacks.
3. Partition the schema-ordered providers into head-bound and body-bound
   sequences.
4. Compare that partition with what currently sits under ``<head>`` and
   ``<body>``.  Providers are compared by the index they were given at
   discovery, never by node identity or structural equality.
5. On any difference, detach every provider and re-append the canonical
   sequences.

Running the normalizer on its own output is a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from slotc._types import Placement, SlotName
from slotc.dom import get_attr, placement, remove

if TYPE_CHECKING:
    from bs4 import Tag

    from slotc.compile.schema import LayoutSchema, SlotSpec
    from slotc.dom import HtmlDocument

# Provider tag chosen by the layout tag of the slot it fills
_PROVIDER_TAGS = {"title": "title", "meta": "meta"}
_DEFAULT_PROVIDER_TAG = "section"


@dataclass(frozen=True, slots=True)
class Provider:
    """A provider element with its discovery index.

    Attributes:
        index: Position in document order at discovery; synthesized
            providers are numbered after every discovered one.
        name: Slot name the element provides.
        element: The page element.
        placement: Where the element sat when discovered (``other`` for
            synthesized providers, which are not in the tree yet).

    """

    index: int
    name: SlotName
    element: Tag
    placement: Placement


@dataclass(frozen=True, slots=True)
class NormalizeResult:
    """Outcome of normalizing one page.

    Attributes:
        document: The (possibly mutated) page tree.
        providers: Canonical provider element per slot name, in schema order.
        changed: True if the tree was rewritten and must be persisted.
        extras: Provider names the schema does not declare, first-seen order.
        auto_added: Slot names that received a synthesized provider.

    """

    document: HtmlDocument
    providers: dict[SlotName, Tag]
    changed: bool
    extras: tuple[SlotName, ...]
    auto_added: tuple[SlotName, ...]

    @property
    def mergeable(self) -> bool:
        """True if the page has no unknown providers."""
        return not self.extras


def provider_tag(spec: SlotSpec) -> str:
    """Tag used for a synthesized provider of *spec*."""
    return _PROVIDER_TAGS.get(spec.layout_tag, _DEFAULT_PROVIDER_TAG)


def discover_providers(
    document: HtmlDocument,
    provider_attr: str = "for-slot",
) -> list[Provider]:
    """Every provider element in document order, duplicates included."""
    return [
        Provider(
            index=index,
            name=get_attr(el, provider_attr) or "",
            element=el,
            placement=placement(el),
        )
        for index, el in enumerate(document.elements_with(provider_attr))
    ]


def normalize_page(
    document: HtmlDocument,
    schema: LayoutSchema,
    *,
    provider_attr: str = "for-slot",
) -> NormalizeResult:
    """Normalize *document* in place against *schema*.

    The caller persists ``result.document`` when ``result.changed`` is set.

    """
    discovered = discover_providers(document, provider_attr)

    first: dict[SlotName, Provider] = {}
    extras: list[SlotName] = []
    for provider in discovered:
        if provider.name in first:
            continue
        first[provider.name] = provider
        if provider.name not in schema:
            extras.append(provider.name)

    canonical: list[tuple[SlotSpec, Provider]] = []
    auto_added: list[SlotName] = []
    next_index = len(discovered)
    for spec in schema:
        provider = first.get(spec.name)
        if provider is None:
            provider = Provider(
                index=next_index,
                name=spec.name,
                element=_synthesize(document, spec, provider_attr),
                placement="other",
            )
            next_index += 1
            auto_added.append(spec.name)
        canonical.append((spec, provider))

    head_seq = [p.index for spec, p in canonical if spec.in_head]
    body_seq = [p.index for spec, p in canonical if not spec.in_head]
    current_head = [p.index for p in discovered if p.placement == "head"]
    current_body = [p.index for p in discovered if p.placement == "body"]
    changed = current_head != head_seq or current_body != body_seq

    if changed:
        for provider in discovered:
            remove(provider.element)
        head = document.ensure_head()
        body = document.ensure_body()
        for spec, provider in canonical:
            (head if spec.in_head else body).append(provider.element)

    return NormalizeResult(
        document=document,
        providers={spec.name: provider.element for spec, provider in canonical},
        changed=changed,
        extras=tuple(extras),
        auto_added=tuple(auto_added),
    )


def _synthesize(document: HtmlDocument, spec: SlotSpec, provider_attr: str) -> Tag:
    attrs = {provider_attr: spec.name}
    if spec.attr_name is not None:
        attrs[spec.attr_name] = ""
    return document.create_element(provider_tag(spec), attrs)
