"""Table of contents parsing for EPUB 3 nav documents and EPUB 2 NCX files."""

import logging
from collections.abc import Callable

from bs4 import BeautifulSoup

from epub_reader.core.archive import Archive
from epub_reader.core.errors import EpubError
from epub_reader.core.paths import resolve_href, strip_fragment
from epub_reader.core.sanitizer import parse_markup
from epub_reader.models.package import Chapter, NavEntry, NavFormat, NavSource

log = logging.getLogger(__name__)

DEFAULT_TITLE = "Chapter"


def parse_nav_document(markup: str, base: str) -> list[NavEntry]:
    """Flatten every anchor under every <nav> into entries, in document order."""
    soup = parse_markup(markup)
    entries = []
    for nav in soup.find_all("nav"):
        for anchor in nav.find_all("a"):
            entries.append(
                NavEntry(
                    title=anchor.get_text().strip(),
                    target_path=resolve_href(base, anchor.get("href") or ""),
                )
            )
    return entries


def parse_ncx(markup: str, base: str) -> list[NavEntry]:
    """Read every navPoint of an NCX file, nested ones included, in document order."""
    soup = BeautifulSoup(markup, "xml")
    entries = []
    for point in soup.find_all("navPoint"):
        label = point.find("text")
        title = label.get_text().strip() if label is not None else ""
        content = point.find("content")
        src = (content.get("src") or "") if content is not None else ""
        entries.append(
            NavEntry(
                title=title or DEFAULT_TITLE,
                target_path=resolve_href(base, src),
            )
        )
    return entries


NAV_PARSERS: dict[NavFormat, Callable[[str, str], list[NavEntry]]] = {
    NavFormat.MODERN: parse_nav_document,
    NavFormat.LEGACY: parse_ncx,
}


def parse_navigation(
    archive: Archive, source: NavSource | None, base: str
) -> list[NavEntry]:
    """Parse the chosen navigation source.

    Navigation is optional: a missing or unreadable source yields no
    entries and the caller falls back to synthetic chapter titles.
    """
    if source is None:
        return []

    try:
        markup = archive.read_text(source.path)
    except EpubError as e:
        log.warning("Failed to read navigation %s: %s", source.path, e)
        return []
    if markup is None:
        log.warning("Navigation %s listed in manifest but missing", source.path)
        return []

    entries = NAV_PARSERS[source.format](markup, base)
    log.debug("Read %d %s navigation entries", len(entries), source.format.value)
    return entries


def _is_segment_suffix(path: str, suffix: str) -> bool:
    return path == suffix or path.endswith("/" + suffix)


def find_chapter_index(target_path: str, chapters: list[Chapter]) -> int | None:
    """Match a navigation target to a chapter.

    Exact path match wins. Otherwise the first chapter whose path and the
    target end with one another on a path-segment boundary is taken, which
    covers archives that normalize paths inconsistently.
    """
    target = strip_fragment(target_path)
    paths = [strip_fragment(ch.path) for ch in chapters]

    for index, path in enumerate(paths):
        if path == target:
            return index

    if not target:
        return None
    for index, path in enumerate(paths):
        if _is_segment_suffix(target, path) or _is_segment_suffix(path, target):
            return index
    return None


def map_to_chapters(entries: list[NavEntry], chapters: list[Chapter]) -> list[NavEntry]:
    """Assign chapter indices to entries. Unresolvable entries point at 0."""
    mapped = []
    for entry in entries:
        index = find_chapter_index(entry.target_path, chapters)
        if index is None:
            log.debug("Navigation target %r matches no chapter", entry.target_path)
            index = 0
        mapped.append(entry.model_copy(update={"chapter_index": index}))
    return mapped
