"""Read-only access to the entries of an EPUB zip archive."""

import hashlib
import io
import logging
import zipfile
import zlib

from epub_reader.core.errors import CorruptArchive, UnsafeArchive
from epub_reader.models.config import ReaderConfig

log = logging.getLogger(__name__)


class Archive:
    """Random-access view over an in-memory zip buffer.

    Entries are looked up by their exact archive path. Missing entries read
    as ``None`` rather than raising, so callers decide how severe absence is.
    """

    def __init__(self, zf: zipfile.ZipFile, identity: str):
        self._zip = zf
        self._names = set(zf.namelist())
        self.identity = identity

    @classmethod
    def open(cls, data: bytes, config: ReaderConfig | None = None) -> "Archive":
        """Open a byte buffer as an archive.

        Raises:
            CorruptArchive: If the buffer is not a zip file
            UnsafeArchive: If the archive exceeds configured limits
        """
        config = config or ReaderConfig()
        try:
            zf = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, ValueError) as e:
            raise CorruptArchive(f"Invalid archive: {e}") from e

        _check_limits(zf, config)

        identity = hashlib.sha256(data).hexdigest()
        log.debug("Opened archive %s with %d entries", identity[:12], len(zf.infolist()))
        return cls(zf, identity)

    def names(self) -> list[str]:
        """List entry names in archive order."""
        return self._zip.namelist()

    def has(self, path: str) -> bool:
        return path in self._names

    def read(self, path: str) -> bytes | None:
        """Read an entry as bytes, or None if it does not exist.

        Raises:
            CorruptArchive: If the entry exists but cannot be decompressed
        """
        if path not in self._names:
            return None
        try:
            return self._zip.read(path)
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            EOFError,
            zlib.error,
            RuntimeError,  # encrypted entry
            NotImplementedError,  # unsupported compression method
        ) as e:
            raise CorruptArchive(f"Failed to read entry: {e}", path=path) from e

    def read_text(self, path: str) -> str | None:
        """Read an entry decoded as UTF-8, or None if it does not exist."""
        data = self.read(path)
        if data is None:
            return None
        return data.decode("utf-8-sig", errors="replace")

    def close(self) -> None:
        self._zip.close()


def _check_limits(zf: zipfile.ZipFile, config: ReaderConfig) -> None:
    """Reject archives with too many entries or too much uncompressed data."""
    infos = zf.infolist()
    if len(infos) > config.max_entries:
        zf.close()
        raise UnsafeArchive(
            f"Archive has {len(infos)} entries (limit {config.max_entries})"
        )

    total = sum(info.file_size for info in infos)
    if total > config.max_total_uncompressed_bytes:
        zf.close()
        raise UnsafeArchive(
            f"Total uncompressed size {total} exceeds limit "
            f"{config.max_total_uncompressed_bytes}"
        )
