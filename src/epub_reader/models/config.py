"""Reader configuration."""

from pydantic import BaseModel, Field


class ReaderConfig(BaseModel):
    """Tunables for loading and searching a package."""

    max_hits_per_chapter: int = Field(default=200, ge=1)
    max_entries: int = Field(default=10_000, ge=1)
    max_total_uncompressed_bytes: int = Field(default=512 * 1024 * 1024, ge=1)
    synthetic_title_template: str = "Chapter {number}"
