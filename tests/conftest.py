"""Pytest fixtures for epub-reader tests.

All EPUB fixtures are built in memory; no network or external files.
"""

from pathlib import Path

import pytest

from epub_builders import make_epub, three_chapter_files
from epub_reader.core.package import Package


@pytest.fixture
def modern_epub() -> bytes:
    """Three chapters with a nav.xhtml table of contents."""
    return make_epub(three_chapter_files(nav="modern"))


@pytest.fixture
def legacy_epub() -> bytes:
    """Three chapters with only a toc.ncx table of contents."""
    return make_epub(three_chapter_files(nav="legacy"))


@pytest.fixture
def package(modern_epub: bytes):
    pkg = Package.from_bytes(modern_epub)
    yield pkg
    pkg.close()


@pytest.fixture
def epub_file(tmp_path: Path, modern_epub: bytes) -> Path:
    path = tmp_path / "moby-dick.epub"
    path.write_bytes(modern_epub)
    return path
