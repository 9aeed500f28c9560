"""Errors raised while opening and reading EPUB packages."""


class EpubError(Exception):
    """Base error for EPUB package processing.

    Carries the pipeline step that failed and the archive entry involved so
    callers can build a user-facing message.
    """

    step: str = "package"

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(message)


class CorruptArchive(EpubError):
    """Buffer is not a readable zip archive."""

    step = "archive"


class UnsafeArchive(CorruptArchive):
    """Archive exceeds the configured entry or size limits."""


class MissingContainer(EpubError):
    """META-INF/container.xml is absent."""

    step = "container"


class MalformedContainer(EpubError):
    """Container descriptor has no usable rootfile."""

    step = "container"


class MissingPackage(EpubError):
    """Package document named by the container cannot be read."""

    step = "package"


class ResourceMissing(EpubError):
    """Referenced entry is not in the archive."""

    step = "resource"


class ChapterNotFound(EpubError, IndexError):
    """Chapter index outside the chapter list."""

    step = "chapter"

    def __init__(self, index: int, total: int):
        self.index = index
        self.total = total
        super().__init__(f"Chapter {index} out of range (0-{total - 1})")
