"""Markup sanitization and plain-text extraction for chapter documents."""

import html
import re
import warnings

from bs4 import BeautifulSoup, Comment, ProcessingInstruction, Tag, XMLParsedAsHTMLWarning

# Suppress XML parsing warnings - EPUB files often use XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)


_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)


def _unwrap_cdata(markup: str) -> str:
    # The HTML tree builder reads CDATA sections as comments
    return _CDATA_RE.sub(lambda m: html.escape(m.group(1), quote=False), markup)


def _is_xml_declaration(node) -> bool:
    if not isinstance(node, (ProcessingInstruction, Comment)):
        return False
    return node.lstrip("?").strip().lower().startswith("xml ")


def parse_markup(markup: str | bytes) -> BeautifulSoup:
    """Parse chapter or navigation markup leniently.

    XHTML specifics the HTML tree builder mangles are normalized first:
    CDATA sections become escaped text and the XML declaration is dropped.
    """
    if isinstance(markup, bytes):
        markup = markup.decode("utf-8", errors="replace")
    soup = BeautifulSoup(_unwrap_cdata(markup), "lxml")
    for node in list(soup.contents):
        if _is_xml_declaration(node):
            node.extract()
    return soup


def _is_script(tag: Tag) -> bool:
    # Namespaced variants such as svg:script count too
    return tag.name == "script" or tag.name.endswith(":script")


def _is_event_handler(attr: str) -> bool:
    return attr.lower().startswith("on")


def sanitize_markup(markup: str) -> str:
    """Remove script elements and inline event handlers.

    Chapter markup comes from an untrusted file, so this runs before any
    markup leaves the loader. Sanitizing already-sanitized output returns it
    unchanged.
    """
    soup = parse_markup(markup)

    for script in soup.find_all(_is_script):
        script.decompose()

    for tag in soup.find_all(True):
        for attr in [a for a in tag.attrs if _is_event_handler(a)]:
            del tag[attr]

    return str(soup)


def extract_text(markup: str) -> str:
    """Body text content with tags stripped, used for search offsets."""
    soup = parse_markup(markup)
    body = soup.body or soup
    return body.get_text()
