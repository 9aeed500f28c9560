"""Tests for the archive accessor and container resolver."""

import hashlib
import zlib
from unittest.mock import patch

import pytest

from epub_builders import corrupt_entry, make_epub
from epub_reader.core.archive import Archive
from epub_reader.core.container import resolve_package_path
from epub_reader.core.errors import (
    CorruptArchive,
    EpubError,
    MalformedContainer,
    MissingContainer,
    UnsafeArchive,
)
from epub_reader.models.config import ReaderConfig


class TestArchive:
    def test_not_a_zip(self):
        with pytest.raises(CorruptArchive) as exc_info:
            Archive.open(b"definitely not a zip file")
        assert exc_info.value.step == "archive"

    def test_empty_buffer(self):
        with pytest.raises(CorruptArchive):
            Archive.open(b"")

    def test_read_text_and_bytes(self):
        archive = Archive.open(make_epub({"OEBPS/a.txt": "héllo", "img.bin": b"\x00\x01"}))
        assert archive.read_text("OEBPS/a.txt") == "héllo"
        assert archive.read("img.bin") == b"\x00\x01"
        assert archive.has("img.bin")

    def test_missing_entry_reads_none(self):
        archive = Archive.open(make_epub({}))
        assert archive.read("nope.xhtml") is None
        assert archive.read_text("nope.xhtml") is None
        assert not archive.has("nope.xhtml")

    def test_bom_dropped(self):
        archive = Archive.open(make_epub({"a.xhtml": "\ufeff<p>x</p>".encode("utf-8")}))
        assert archive.read_text("a.xhtml") == "<p>x</p>"

    def test_invalid_utf8_replaced(self):
        archive = Archive.open(make_epub({"a.xhtml": b"ok \xff end"}))
        assert archive.read_text("a.xhtml") == "ok \ufffd end"

    def test_identity_is_sha256_of_buffer(self):
        data = make_epub({})
        assert Archive.open(data).identity == hashlib.sha256(data).hexdigest()

    def test_entry_limit(self):
        data = make_epub({f"f{i}.txt": "x" for i in range(5)})
        with pytest.raises(UnsafeArchive):
            Archive.open(data, ReaderConfig(max_entries=3))

    def test_size_limit(self):
        data = make_epub({"big.txt": "x" * 5000})
        with pytest.raises(UnsafeArchive) as exc_info:
            Archive.open(data, ReaderConfig(max_total_uncompressed_bytes=1000))
        # Unsafe archives are a kind of corrupt archive for callers
        assert isinstance(exc_info.value, CorruptArchive)

    def test_names_in_archive_order(self):
        archive = Archive.open(make_epub({"OEBPS/b.xhtml": "b", "OEBPS/a.xhtml": "a"}))
        assert archive.names() == [
            "mimetype",
            "META-INF/container.xml",
            "OEBPS/b.xhtml",
            "OEBPS/a.xhtml",
        ]


class TestDamagedEntries:
    def test_damaged_deflate_stream(self):
        data = corrupt_entry(make_epub({"OEBPS/a.xhtml": "<p>text</p>" * 20}), "OEBPS/a.xhtml")
        archive = Archive.open(data)

        with pytest.raises(CorruptArchive) as exc_info:
            archive.read_text("OEBPS/a.xhtml")
        assert exc_info.value.path == "OEBPS/a.xhtml"
        # Neighbouring entries still read
        assert archive.read_text("META-INF/container.xml") is not None

    @pytest.mark.parametrize(
        "error",
        [
            zlib.error("invalid block type"),
            RuntimeError("File is encrypted, password required for extraction"),
            NotImplementedError("That compression method is not supported"),
        ],
    )
    def test_unreadable_entry_errors_are_typed(self, error):
        archive = Archive.open(make_epub({"a.xhtml": "<p>x</p>"}))
        with patch.object(archive._zip, "read", side_effect=error):
            with pytest.raises(CorruptArchive) as exc_info:
                archive.read("a.xhtml")
        assert exc_info.value.__cause__ is error


class TestContainer:
    def test_rootfile_path(self):
        archive = Archive.open(make_epub({}, opf_path="OPS/package.opf"))
        assert resolve_package_path(archive) == "OPS/package.opf"

    def test_missing_container(self):
        archive = Archive.open(make_epub({}, container=False))
        with pytest.raises(MissingContainer) as exc_info:
            resolve_package_path(archive)
        assert exc_info.value.path == "META-INF/container.xml"
        assert exc_info.value.step == "container"

    def test_no_rootfile(self):
        xml = '<?xml version="1.0"?><container><rootfiles/></container>'
        archive = Archive.open(make_epub({"META-INF/container.xml": xml}, container=False))
        with pytest.raises(MalformedContainer):
            resolve_package_path(archive)

    def test_rootfile_without_full_path(self):
        xml = '<?xml version="1.0"?><container><rootfiles><rootfile/></rootfiles></container>'
        archive = Archive.open(make_epub({"META-INF/container.xml": xml}, container=False))
        with pytest.raises(MalformedContainer):
            resolve_package_path(archive)

    def test_first_rootfile_wins(self):
        xml = """<?xml version="1.0"?>
<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container" version="1.0">
  <rootfiles>
    <rootfile full-path="first.opf" media-type="application/oebps-package+xml"/>
    <rootfile full-path="second.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""
        archive = Archive.open(make_epub({"META-INF/container.xml": xml}, container=False))
        assert resolve_package_path(archive) == "first.opf"

    def test_errors_share_base_class(self):
        assert issubclass(MissingContainer, EpubError)
        assert issubclass(MalformedContainer, EpubError)
