"""Package document (OPF) parsing: manifest, spine, chapters, metadata."""

import logging
import re

from bs4 import BeautifulSoup, Tag

from epub_reader.core.archive import Archive
from epub_reader.core.errors import MissingPackage
from epub_reader.core.paths import base_path, resolve_href
from epub_reader.models.package import (
    BookMetadata,
    Chapter,
    ManifestItem,
    NavFormat,
    NavSource,
    ParsedPackage,
    SpineEntry,
)

log = logging.getLogger(__name__)

NAV_DOCUMENT_RE = re.compile(r"nav\.x?html$", re.IGNORECASE)
LEGACY_NAV_RE = re.compile(r"\.ncx$", re.IGNORECASE)


class PackageParser:
    """Parse the package document and project it into chapters."""

    def __init__(self, archive: Archive, package_path: str):
        self.archive = archive
        self.package_path = package_path
        self.base_path = base_path(package_path)

        xml = archive.read_text(package_path)
        if xml is None:
            raise MissingPackage(f"OPF not found: {package_path}", path=package_path)
        self.soup = BeautifulSoup(xml, "xml")

    def parse(self) -> ParsedPackage:
        """Parse the package and return its complete structure."""
        manifest = self._get_manifest()
        spine = self._get_spine()
        chapters = self._get_chapters(manifest, spine)

        log.debug(
            "Parsed %s: %d manifest items, %d spine entries, %d chapters",
            self.package_path,
            len(manifest),
            len(spine),
            len(chapters),
        )

        return ParsedPackage(
            base_path=self.base_path,
            package_path=self.package_path,
            metadata=self._get_metadata(),
            manifest=manifest,
            spine=spine,
            chapters=chapters,
            nav_source=self._find_nav_source(manifest),
        )

    def _get_metadata(self) -> BookMetadata:
        """Extract Dublin Core metadata."""
        metadata = self.soup.find("metadata")
        if metadata is None:
            return BookMetadata()

        def texts(name: str) -> list[str]:
            values = (el.get_text(strip=True) for el in metadata.find_all(name))
            return [v for v in values if v]

        title = texts("title")
        language = texts("language")
        publisher = texts("publisher")

        return BookMetadata(
            title=title[0] if title else "Unknown Title",
            authors=texts("creator"),
            language=language[0] if language else None,
            publisher=publisher[0] if publisher else None,
        )

    def _get_manifest(self) -> dict[str, ManifestItem]:
        """Map item ids to items with hrefs resolved against the base path."""
        manifest: dict[str, ManifestItem] = {}
        section = self.soup.find("manifest")
        if not isinstance(section, Tag):
            return manifest

        for node in section.find_all("item", recursive=False):
            item_id = node.get("id")
            href = node.get("href")
            if not item_id or href is None:
                log.debug("Skipping manifest item without id/href: %s", node)
                continue
            manifest[item_id] = ManifestItem(
                id=item_id,
                path=resolve_href(self.base_path, href),
                media_type=node.get("media-type", ""),
            )
        return manifest

    def _get_spine(self) -> list[SpineEntry]:
        """Get reading order from spine."""
        section = self.soup.find("spine")
        if not isinstance(section, Tag):
            return []
        return [
            SpineEntry(item_id=node.get("idref", ""))
            for node in section.find_all("itemref", recursive=False)
        ]

    def _get_chapters(
        self, manifest: dict[str, ManifestItem], spine: list[SpineEntry]
    ) -> list[Chapter]:
        """One chapter per spine entry that resolves in the manifest."""
        chapters: list[Chapter] = []
        for entry in spine:
            item = manifest.get(entry.item_id)
            if item is None:
                # Dangling references are tolerated, not reported
                log.debug("Spine entry %r not in manifest, skipped", entry.item_id)
                continue
            chapters.append(
                Chapter(index=len(chapters), item_id=item.id, path=item.path)
            )
        return chapters

    def _find_nav_source(self, manifest: dict[str, ManifestItem]) -> NavSource | None:
        """Prefer a navigation document, then a legacy NCX file."""
        for item in manifest.values():
            if NAV_DOCUMENT_RE.search(item.path):
                return NavSource(format=NavFormat.MODERN, path=item.path)
        for item in manifest.values():
            if LEGACY_NAV_RE.search(item.path):
                return NavSource(format=NavFormat.LEGACY, path=item.path)
        log.debug("No navigation source in manifest")
        return None


def parse_package(archive: Archive, package_path: str) -> ParsedPackage:
    """Parse the package document at ``package_path``.

    Raises:
        MissingPackage: If the package document is not in the archive
    """
    return PackageParser(archive, package_path).parse()
