"""Document adapter — the thin layer slotc needs over BeautifulSoup.

Parsing uses the stdlib ``html.parser`` tree builder, which keeps every
element where the author wrote it.  Builders that repair documents to the
HTML5 content model would move a ``<section>`` provider out of ``<head>``
on every parse, and normalization could never settle.

Element helpers are plain functions over ``bs4.Tag`` so the compile layer
never touches BeautifulSoup APIs directly.
"""

from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup, Doctype, ParserRejectedMarkup, Tag

from slotc._errors import DocumentError
from slotc._types import Placement

PARSER = "html.parser"


class HtmlDocument:
    """A mutable parsed HTML tree.

    Element identity is stable across mutations for the lifetime of one
    parse: ``extract()`` / ``append()`` move the same ``Tag`` objects.

    """

    __slots__ = ("_soup", "name")

    def __init__(self, soup: BeautifulSoup, *, name: str = "<string>") -> None:
        self._soup = soup
        self.name = name

    @classmethod
    def parse(cls, text: str, *, name: str = "<string>") -> HtmlDocument:
        """Parse HTML text into a document.

        Raises:
            DocumentError: If the parser rejects the markup.

        """
        try:
            soup = BeautifulSoup(text, PARSER)
        except ParserRejectedMarkup as exc:
            msg = f"Failed to parse {name}: {exc}"
            raise DocumentError(msg) from exc
        return cls(soup, name=name)

    @classmethod
    def load(cls, path: Path) -> HtmlDocument:
        """Read and parse an HTML file.

        Raises:
            DocumentError: If the file cannot be read, decoded, or parsed.

        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read {path.name}: {exc}"
            raise DocumentError(msg) from exc
        return cls.parse(text, name=path.name)

    def serialize(self) -> str:
        """Serialize the tree back to HTML text."""
        return self._soup.decode()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def elements_with(self, attr: str) -> list[Tag]:
        """All elements carrying *attr*, in document order."""
        return self._soup.find_all(attrs={attr: True})

    def elements_where(self, attr: str, value: str) -> list[Tag]:
        """All elements whose *attr* equals *value*, in document order."""
        return [el for el in self.elements_with(attr) if get_attr(el, attr) == value]

    @property
    def head(self) -> Tag | None:
        return self._soup.find("head")

    @property
    def body(self) -> Tag | None:
        return self._soup.find("body")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def create_element(self, tag: str, attrs: dict[str, str] | None = None) -> Tag:
        """Create a detached element owned by this document."""
        return self._soup.new_tag(tag, attrs=attrs or {})

    def ensure_head(self) -> Tag:
        """Return ``<head>``, creating an empty one first in the document if missing."""
        head = self.head
        if head is not None:
            return head
        head = self.create_element("head")
        html = self._soup.find("html")
        if html is not None:
            html.insert(0, head)
        else:
            self._soup.insert(self._after_doctype(), head)
        return head

    def ensure_body(self) -> Tag:
        """Return ``<body>``, appending an empty one to the document if missing."""
        body = self.body
        if body is not None:
            return body
        body = self.create_element("body")
        html = self._soup.find("html")
        (html if html is not None else self._soup).append(body)
        return body

    def _after_doctype(self) -> int:
        position = 0
        for index, node in enumerate(self._soup.contents):
            if isinstance(node, Doctype):
                position = index + 1
        return position


# ---------------------------------------------------------------------------
# Element helpers
# ---------------------------------------------------------------------------


def tag_name(el: Tag) -> str:
    """Lowercase tag name."""
    return el.name.lower()


def get_attr(el: Tag, name: str) -> str | None:
    """Read an attribute as a string, or None when absent.

    BeautifulSoup splits multi-valued attributes such as ``class`` into
    lists; they are joined back with single spaces.
    """
    value = el.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def set_attr(el: Tag, name: str, value: str) -> None:
    el[name] = value


def remove_attr(el: Tag, name: str) -> None:
    if el.has_attr(name):
        del el[name]


def has_ancestor(el: Tag, name: str) -> bool:
    return el.find_parent(name) is not None


def placement(el: Tag) -> Placement:
    """Whether *el* currently sits under ``<head>``, ``<body>``, or neither."""
    if has_ancestor(el, "head"):
        return "head"
    if has_ancestor(el, "body"):
        return "body"
    return "other"


def remove(el: Tag) -> None:
    """Detach *el* (and its subtree) from its document."""
    el.extract()


def get_text(el: Tag) -> str:
    return el.get_text()


def set_text(el: Tag, text: str) -> None:
    """Replace all children of *el* with a single text node."""
    el.string = text


def inner_html(el: Tag) -> str:
    return el.decode_contents()


def set_inner_html(el: Tag, markup: str) -> None:
    """Replace all children of *el* with the parsed *markup*."""
    fragment = BeautifulSoup(markup, PARSER)
    el.clear()
    for node in list(fragment.contents):
        el.append(node.extract())
