"""Render sanitized chapter markup for terminal or file output."""

import re
from collections.abc import Callable
from typing import Literal

from bs4 import BeautifulSoup
from markdownify import markdownify as md

from epub_reader.core.sanitizer import parse_markup

OutputFormat = Literal["markdown", "text", "html"]

TEXT_BLOCKS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote", "pre", "dt", "dd"]

_BLANK_RUNS = re.compile(r"\n{3,}")
_SPACES = re.compile(r"\s+")


class ContentProcessor:
    """Turn chapter markup into markdown, plain text or body-only HTML.

    Input is expected to be sanitized already; this only drops
    presentation (``<style>``) and replaces images with their alt text
    where the output cannot show them.
    """

    def __init__(self):
        self._renderers: dict[str, Callable[[BeautifulSoup], str]] = {
            "markdown": self._to_markdown,
            "text": self._to_plain_text,
            "html": self._to_clean_html,
        }

    def process(self, markup: str, output_format: OutputFormat = "markdown") -> str:
        """Convert chapter markup to the requested format."""
        if output_format not in self._renderers:
            raise ValueError(f"Unsupported output format: {output_format}")

        soup = parse_markup(markup)
        for tag in soup.find_all("style"):
            tag.decompose()
        return self._renderers[output_format](soup)

    def _to_markdown(self, soup: BeautifulSoup) -> str:
        _replace_images(soup)
        body = soup.body or soup
        markdown = md(str(body), heading_style="ATX", bullets="-")
        lines = "\n".join(line.rstrip() for line in markdown.split("\n"))
        return _BLANK_RUNS.sub("\n\n", lines).strip()

    def _to_plain_text(self, soup: BeautifulSoup) -> str:
        """One paragraph per text block, whitespace collapsed."""
        _replace_images(soup)
        paragraphs = []
        for block in soup.find_all(TEXT_BLOCKS):
            # Outer blocks already include nested ones
            if block.find_parent(TEXT_BLOCKS) is not None:
                continue
            text = _SPACES.sub(" ", block.get_text()).strip()
            if text:
                paragraphs.append(text)
        return "\n\n".join(paragraphs)

    def _to_clean_html(self, soup: BeautifulSoup) -> str:
        body = soup.body or soup
        return str(body)

    def get_stats(self, content: str) -> dict[str, int]:
        """Word, character and paragraph counts of rendered content."""
        paragraphs = [p for p in content.split("\n\n") if p.strip()]
        return {
            "word_count": len(content.split()),
            "character_count": len(content),
            "paragraph_count": len(paragraphs),
        }


def _replace_images(soup: BeautifulSoup) -> None:
    for img in soup.find_all("img"):
        alt = (img.get("alt") or "").strip()
        if alt:
            img.replace_with(f"[image: {alt}]")
        else:
            img.decompose()
