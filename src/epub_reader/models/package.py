"""Data models for EPUB package structure."""

from enum import Enum

from pydantic import BaseModel, Field


class NavFormat(str, Enum):
    """Shape of the navigation source."""

    MODERN = "modern"  # EPUB 3 nav.xhtml
    LEGACY = "legacy"  # EPUB 2 toc.ncx


class ManifestItem(BaseModel):
    """Single item declared in the package manifest."""

    id: str
    path: str
    media_type: str = ""


class SpineEntry(BaseModel):
    """Reading-order reference to a manifest item."""

    item_id: str


class Chapter(BaseModel):
    """One readable unit in spine order."""

    index: int = Field(ge=0)
    item_id: str
    path: str


class NavSource(BaseModel):
    """Navigation document chosen at load time."""

    format: NavFormat
    path: str


class NavEntry(BaseModel):
    """Table of contents entry mapped onto a chapter."""

    title: str
    target_path: str
    chapter_index: int = 0

    @property
    def fragment(self) -> str | None:
        """Anchor within the target chapter, if any."""
        if "#" not in self.target_path:
            return None
        return self.target_path.split("#", 1)[1] or None


class BookMetadata(BaseModel):
    """Book-level metadata."""

    title: str = "Unknown Title"
    authors: list[str] = Field(default_factory=list)
    language: str | None = None
    publisher: str | None = None


class ParsedPackage(BaseModel):
    """Everything read from the package document."""

    base_path: str
    package_path: str
    metadata: BookMetadata
    manifest: dict[str, ManifestItem]
    spine: list[SpineEntry]
    chapters: list[Chapter]
    nav_source: NavSource | None = None
