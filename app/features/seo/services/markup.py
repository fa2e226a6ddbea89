from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

# Text inside these elements is not visible page content.
NON_CONTENT_TAGS = {"head", "title", "script", "style", "noscript", "template"}


class HtmlNode:
    """A single element of a parsed HTML document."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def name(self) -> str:
        return self._tag.name

    def attribute(self, name: str) -> Optional[str]:
        """Attribute value, or None when absent. Multi-valued attributes are space-joined."""
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return value

    def has_attribute(self, name: str) -> bool:
        return self._tag.has_attr(name)

    def text(self) -> str:
        return " ".join(self._tag.get_text(" ").split())

    def raw_text(self) -> str:
        """Unmodified text content, e.g. the body of a <script> element."""
        return self._tag.get_text()

    def query(self, selector: str) -> List["HtmlNode"]:
        return [HtmlNode(tag) for tag in self._tag.select(selector)]

    def query_one(self, selector: str) -> Optional["HtmlNode"]:
        tag = self._tag.select_one(selector)
        return HtmlNode(tag) if tag is not None else None

    def __repr__(self):
        return f"<HtmlNode {self._tag.name}>"


class HtmlDocument:
    """
    Parsed HTML page with typed accessors.

    Wraps a BeautifulSoup tree so the extractors never touch bs4 directly.
    """

    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    def query(self, selector: str) -> List[HtmlNode]:
        """All elements matching a CSS selector, in document order."""
        return [HtmlNode(tag) for tag in self._soup.select(selector)]

    def query_one(self, selector: str) -> Optional[HtmlNode]:
        tag = self._soup.select_one(selector)
        return HtmlNode(tag) if tag is not None else None

    def elements(self, name: str) -> List[HtmlNode]:
        return [HtmlNode(tag) for tag in self._soup.find_all(name)]

    def title(self) -> str:
        tag = self._soup.find("title")
        return tag.get_text().strip() if tag is not None else ""

    def _visible_strings(self) -> Iterator[str]:
        root = self._soup.body or self._soup
        for string in root.find_all(string=True):
            # comments, doctype, script bodies
            if type(string) is not NavigableString:
                continue
            if any(parent.name in NON_CONTENT_TAGS for parent in string.parents):
                continue
            yield string

    def text(self) -> str:
        """Visible text of the page body with whitespace collapsed."""
        return " ".join(" ".join(self._visible_strings()).split())


def parse_html(html: str) -> HtmlDocument:
    return HtmlDocument(BeautifulSoup(html or "", "html.parser"))
