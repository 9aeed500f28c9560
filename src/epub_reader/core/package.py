"""Loaded EPUB package: the entry point for readers of the format."""

import logging
from pathlib import Path

from epub_reader.core.archive import Archive
from epub_reader.core.chapter_loader import ChapterLoader
from epub_reader.core.container import resolve_package_path
from epub_reader.core.errors import ChapterNotFound, EpubError, ResourceMissing
from epub_reader.core.navigation import map_to_chapters, parse_navigation
from epub_reader.core.package_parser import parse_package
from epub_reader.core.paths import is_external, resolve_resource
from epub_reader.core.resources import collect_resource_refs, guess_media_type
from epub_reader.models.config import ReaderConfig
from epub_reader.models.content import ChapterContent, Resource, ResourceRef, SearchHit
from epub_reader.models.package import (
    BookMetadata,
    Chapter,
    ManifestItem,
    NavEntry,
    NavSource,
    ParsedPackage,
    SpineEntry,
)

log = logging.getLogger(__name__)


class Package:
    """A parsed EPUB held in memory.

    Build one with ``Package.from_bytes``. Construction either completes or
    raises; chapter content is loaded lazily afterwards and cached for the
    lifetime of the object.
    """

    def __init__(
        self,
        archive: Archive,
        parsed: ParsedPackage,
        nav: list[NavEntry],
        config: ReaderConfig,
    ):
        self.archive = archive
        self.config = config
        self._parsed = parsed
        self._nav = nav
        self._loader = ChapterLoader(archive, parsed.chapters)

    @classmethod
    def from_bytes(cls, data: bytes, config: ReaderConfig | None = None) -> "Package":
        """Parse an EPUB archive buffer.

        Raises:
            CorruptArchive: If the buffer is not a usable zip archive
            MissingContainer: If META-INF/container.xml is absent
            MalformedContainer: If the container names no package document
            MissingPackage: If the package document is absent
        """
        config = config or ReaderConfig()
        archive = Archive.open(data, config)
        try:
            package_path = resolve_package_path(archive)
            parsed = parse_package(archive, package_path)
            entries = parse_navigation(archive, parsed.nav_source, parsed.base_path)
            nav = map_to_chapters(entries, parsed.chapters)
        except Exception:
            archive.close()
            raise

        log.info(
            "Loaded %r: %d chapters, %d navigation entries",
            parsed.metadata.title,
            len(parsed.chapters),
            len(nav),
        )
        return cls(archive, parsed, nav, config)

    @classmethod
    def from_path(cls, path: Path, config: ReaderConfig | None = None) -> "Package":
        """Read an EPUB file from disk and parse it."""
        return cls.from_bytes(path.read_bytes(), config)

    # -- structure -------------------------------------------------------

    @property
    def identity(self) -> str:
        """SHA-256 of the archive buffer, usable as a persistence key."""
        return self.archive.identity

    @property
    def metadata(self) -> BookMetadata:
        return self._parsed.metadata

    @property
    def base_path(self) -> str:
        return self._parsed.base_path

    @property
    def manifest(self) -> dict[str, ManifestItem]:
        return self._parsed.manifest

    @property
    def spine(self) -> list[SpineEntry]:
        return self._parsed.spine

    @property
    def chapters(self) -> list[Chapter]:
        return self._parsed.chapters

    @property
    def nav_source(self) -> NavSource | None:
        return self._parsed.nav_source

    @property
    def nav(self) -> list[NavEntry]:
        """Navigation entries mapped to chapters; empty when the book has none."""
        return self._nav

    def toc(self) -> list[NavEntry]:
        """Navigation entries, or one synthetic entry per chapter if there are none."""
        if self._nav:
            return self._nav
        return [
            NavEntry(
                title=self.config.synthetic_title_template.format(number=ch.index + 1),
                target_path=ch.path,
                chapter_index=ch.index,
            )
            for ch in self.chapters
        ]

    # -- chapters --------------------------------------------------------

    def chapter_content(self, index: int) -> ChapterContent:
        """Load (once) and return a chapter's markup and text.

        Raises:
            ChapterNotFound: If index is out of range
            ResourceMissing: If the chapter's entry is absent; the rest of
                the package stays usable
        """
        return self._loader.load(index)

    def load_chapter(self, index: int) -> str:
        """Sanitized markup of a chapter."""
        return self._loader.load(index).sanitized_markup

    def plain_text(self, index: int) -> str | None:
        """Cached plain text of a chapter, or None if it is not loaded yet."""
        content = self._loader.cached(index)
        return content.plain_text if content is not None else None

    def load_all(self) -> int:
        """Load every chapter, skipping unavailable or corrupt ones.

        Returns the number of chapters loaded.
        """
        loaded = 0
        for chapter in self.chapters:
            try:
                self._loader.load(chapter.index)
            except EpubError as e:
                log.warning("Chapter %d unavailable: %s", chapter.index, e)
                continue
            loaded += 1
        return loaded

    def search(self, query: str | None) -> list[SearchHit]:
        """Case-insensitive substring search over loaded chapters.

        Matches do not overlap and are capped per chapter so repetitive
        text cannot produce unbounded results.
        """
        if not query:
            return []

        needle = query.lower()
        limit = self.config.max_hits_per_chapter
        hits: list[SearchHit] = []

        for chapter in self.chapters:
            text = self.plain_text(chapter.index)
            if not text:
                continue
            haystack = text.lower()
            count = 0
            pos = haystack.find(needle)
            while pos != -1 and count < limit:
                hits.append(SearchHit(chapter_index=chapter.index, offset=pos))
                count += 1
                pos = haystack.find(needle, pos + len(needle))

        return hits

    # -- resources -------------------------------------------------------

    def resolve_resource(self, chapter_index: int, reference: str) -> str:
        """Archive path of a resource referenced from a chapter."""
        return resolve_resource(self._chapter(chapter_index).path, reference)

    def resources(self, chapter_index: int) -> list[ResourceRef]:
        """Images and stylesheets referenced by a chapter's sanitized markup."""
        chapter = self._chapter(chapter_index)
        markup = self.load_chapter(chapter_index)
        return collect_resource_refs(chapter.path, markup)

    def load_resource(self, chapter_index: int, reference: str) -> Resource:
        """Bytes and media type of a resource referenced from a chapter.

        Raises:
            ResourceMissing: If the reference is external or not in the archive
        """
        return self.read_resource(self.resolve_resource(chapter_index, reference))

    def read_resource(self, path: str) -> Resource:
        """Bytes and media type of an archive entry by canonical path."""
        if is_external(path):
            raise ResourceMissing(f"External resource not in archive: {path}", path=path)
        data = self.archive.read(path)
        if data is None:
            raise ResourceMissing(f"Resource not found in archive: {path}", path=path)
        return Resource(path=path, data=data, media_type=guess_media_type(path, self.manifest))

    def close(self) -> None:
        self.archive.close()

    def __enter__(self) -> "Package":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _chapter(self, index: int) -> Chapter:
        if index < 0 or index >= len(self.chapters):
            raise ChapterNotFound(index, len(self.chapters))
        return self.chapters[index]
