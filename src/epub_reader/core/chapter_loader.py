"""On-demand chapter loading with per-chapter memoization."""

import logging
import threading
from dataclasses import dataclass, field

from epub_reader.core.archive import Archive
from epub_reader.core.errors import ChapterNotFound, ResourceMissing
from epub_reader.core.sanitizer import extract_text, sanitize_markup
from epub_reader.models.content import ChapterContent
from epub_reader.models.package import Chapter

log = logging.getLogger(__name__)


@dataclass
class _ChapterCell:
    """Write-once cache slot for one chapter."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    content: ChapterContent | None = None


class ChapterLoader:
    """Load, sanitize and cache chapter markup.

    Each chapter is parsed at most once. Concurrent callers asking for the
    same unloaded chapter wait on that chapter's lock and receive the first
    caller's result; different chapters load independently.
    """

    def __init__(self, archive: Archive, chapters: list[Chapter]):
        self.archive = archive
        self.chapters = chapters
        self._cells = [_ChapterCell() for _ in chapters]

    def load(self, index: int) -> ChapterContent:
        """Return the chapter's content, loading it on first access.

        Raises:
            ChapterNotFound: If index is out of range
            ResourceMissing: If the chapter's entry is not in the archive
        """
        if index < 0 or index >= len(self.chapters):
            raise ChapterNotFound(index, len(self.chapters))

        cell = self._cells[index]
        if cell.content is not None:
            return cell.content

        with cell.lock:
            if cell.content is None:
                cell.content = self._read(self.chapters[index])
            return cell.content

    def cached(self, index: int) -> ChapterContent | None:
        """Content if already loaded, without triggering a load."""
        if index < 0 or index >= len(self._cells):
            return None
        return self._cells[index].content

    def _read(self, chapter: Chapter) -> ChapterContent:
        raw = self.archive.read_text(chapter.path)
        if raw is None:
            raise ResourceMissing(
                f"Chapter {chapter.index} not found in archive: {chapter.path}",
                path=chapter.path,
            )

        sanitized = sanitize_markup(raw)
        log.debug("Loaded chapter %d from %s", chapter.index, chapter.path)
        return ChapterContent(
            raw_markup=raw,
            sanitized_markup=sanitized,
            plain_text=extract_text(sanitized),
        )
