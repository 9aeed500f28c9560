"""Data models."""

from epub_reader.models.config import ReaderConfig
from epub_reader.models.content import (
    ChapterContent,
    Resource,
    ResourceRef,
    SearchHit,
)
from epub_reader.models.package import (
    BookMetadata,
    Chapter,
    ManifestItem,
    NavEntry,
    NavFormat,
    NavSource,
    ParsedPackage,
    SpineEntry,
)

__all__ = [
    # Package models
    "ManifestItem",
    "SpineEntry",
    "Chapter",
    "NavFormat",
    "NavSource",
    "NavEntry",
    "BookMetadata",
    "ParsedPackage",
    # Content models
    "ChapterContent",
    "ResourceRef",
    "Resource",
    "SearchHit",
    # Configuration
    "ReaderConfig",
]
