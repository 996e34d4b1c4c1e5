"""Parse HTML strings into a BeautifulSoup tree and serialize them back.

Parsing is permissive: malformed markup is repaired by the parser backend, never
rejected. The default backend, html5lib, applies the same recovery rules a browser
does, so an unclosed <p> ends where the next block starts.

Serialization uses an HTML5-style formatter so void elements come out as `<br>`
and non-ASCII text is not re-encoded as named entities.
"""

from __future__ import annotations

import re
from typing import Iterator

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from core.errors import ParseFailure, SerializationFailure

SUPPORTED_PARSERS = ("html.parser", "lxml", "html5lib")
DEFAULT_PARSER = "html5lib"

# Backends other than html.parser wrap fragments in <html><body>.
_DOCUMENT_RE = re.compile(r"<\s*(html|body)[\s>/]", re.IGNORECASE)

HTML5_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)


class HtmlDocumentFragment:
    """An in-memory tree for one sanitize call."""

    def __init__(self, soup: BeautifulSoup, root: Tag):
        self.soup = soup
        self.root = root

    def elements(self) -> Iterator[Tag]:
        """Yield every element under the root, in document order.

        The list is materialised first so callers may remove nodes while iterating.
        """
        yield from list(self.root.find_all(True))

    def find_all(self, names) -> list[Tag]:
        return list(self.root.find_all(names))

    def serialize(self) -> str:
        try:
            if self.root is self.soup:
                return self.soup.decode(formatter=HTML5_FORMATTER)
            return self.root.decode_contents(formatter=HTML5_FORMATTER)
        except Exception as e:
            raise SerializationFailure(f"Could not serialize fragment: {e}") from e


def parse(html: str, parser: str = DEFAULT_PARSER) -> HtmlDocumentFragment:
    """Build a fragment tree from an HTML string."""
    if parser not in SUPPORTED_PARSERS:
        raise ParseFailure(
            f"Unsupported HTML parser {parser!r}. Options: {', '.join(SUPPORTED_PARSERS)}"
        )
    try:
        soup = BeautifulSoup(html, parser)
    except Exception as e:
        raise ParseFailure(f"Could not parse HTML: {e}") from e

    root: Tag = soup
    if parser != "html.parser" and not _DOCUMENT_RE.search(html) and soup.body is not None:
        root = soup.body
        # Whitespace before the first tag is dropped while the parser builds <head>.
        leading = html[: len(html) - len(html.lstrip())]
        first = root.contents[0] if root.contents else None
        if leading and not (isinstance(first, NavigableString) and first.startswith(leading)):
            root.insert(0, NavigableString(leading))
    return HtmlDocumentFragment(soup, root)


def serialize(fragment: HtmlDocumentFragment) -> str:
    return fragment.serialize()
