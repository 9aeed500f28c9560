"""Data models for loaded chapter content and resources."""

from typing import Literal

from pydantic import BaseModel


class ChapterContent(BaseModel):
    """Markup and text of a loaded chapter. Written once per chapter."""

    raw_markup: str
    sanitized_markup: str
    plain_text: str


class ResourceRef(BaseModel):
    """Resource referenced from chapter markup."""

    kind: Literal["image", "stylesheet"]
    reference: str  # as written in the markup
    path: str  # resolved archive path, or the URL itself when external


class Resource(BaseModel):
    """Bytes of an archive entry plus its media type."""

    path: str
    data: bytes
    media_type: str


class SearchHit(BaseModel):
    """Position of a search match in a chapter's plain text."""

    chapter_index: int
    offset: int
