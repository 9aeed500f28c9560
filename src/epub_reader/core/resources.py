"""Embedded resource discovery and media type lookup."""

import posixpath

from epub_reader.core.paths import resolve_resource
from epub_reader.core.sanitizer import parse_markup
from epub_reader.models.content import ResourceRef
from epub_reader.models.package import ManifestItem

EXTENSION_MEDIA_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".css": "text/css",
    ".xhtml": "application/xhtml+xml",
    ".html": "text/html",
    ".ncx": "application/x-dtbncx+xml",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
}


def collect_resource_refs(chapter_path: str, markup: str) -> list[ResourceRef]:
    """Find images and linked stylesheets in chapter markup.

    Images use ``src`` and fall back to ``data-src``. Only ``link`` elements
    with ``rel="stylesheet"`` are considered.
    """
    soup = parse_markup(markup)
    refs: list[ResourceRef] = []

    for img in soup.find_all("img"):
        src = img.get("src") or img.get("data-src")
        if not src:
            continue
        refs.append(
            ResourceRef(
                kind="image",
                reference=src,
                path=resolve_resource(chapter_path, src),
            )
        )

    for link in soup.find_all("link"):
        # rel is multi-valued in the HTML tree builder
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        href = link.get("href")
        if "stylesheet" not in [r.lower() for r in rel] or not href:
            continue
        refs.append(
            ResourceRef(
                kind="stylesheet",
                reference=href,
                path=resolve_resource(chapter_path, href),
            )
        )

    return refs


def guess_media_type(path: str, manifest: dict[str, ManifestItem]) -> str:
    """Media type from the manifest entry for ``path``, else from its extension."""
    for item in manifest.values():
        if item.path == path and item.media_type:
            return item.media_type
    ext = posixpath.splitext(path)[1].lower()
    return EXTENSION_MEDIA_TYPES.get(ext, "application/octet-stream")
