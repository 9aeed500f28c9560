"""Locate the package document through META-INF/container.xml."""

import logging

from bs4 import BeautifulSoup

from epub_reader.core.archive import Archive
from epub_reader.core.errors import MalformedContainer, MissingContainer

log = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


def resolve_package_path(archive: Archive) -> str:
    """Return the archive path of the package document (the .opf file).

    Raises:
        MissingContainer: If the container descriptor is absent
        MalformedContainer: If no rootfile with a full-path is declared
    """
    xml = archive.read_text(CONTAINER_PATH)
    if xml is None:
        raise MissingContainer(
            "Invalid EPUB: container.xml not found", path=CONTAINER_PATH
        )

    soup = BeautifulSoup(xml, "xml")
    rootfile = soup.find("rootfile")
    if rootfile is None:
        raise MalformedContainer(
            "Invalid EPUB: container.xml declares no rootfile", path=CONTAINER_PATH
        )

    full_path = (rootfile.get("full-path") or "").strip()
    if not full_path:
        raise MalformedContainer(
            "Invalid EPUB: rootfile has no full-path", path=CONTAINER_PATH
        )

    log.debug("Package document at %s", full_path)
    return full_path
