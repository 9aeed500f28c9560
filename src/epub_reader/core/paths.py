"""Path resolution inside an EPUB archive.

Two rules apply. Manifest hrefs are resolved once against the package
document's directory (``resolve_href``). References found inside chapter
markup are resolved against that chapter's own directory and collapsed to a
canonical archive path (``resolve_resource``).
"""

import re

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)


def is_external(href: str) -> bool:
    """True for scheme-prefixed references such as http: or data: URLs."""
    return bool(_SCHEME_RE.match(href))


def base_path(document_path: str) -> str:
    """Directory of an archive path with a trailing slash, or '' at the root."""
    if "/" not in document_path:
        return ""
    return document_path.rsplit("/", 1)[0] + "/"


def resolve_href(base: str, href: str) -> str:
    """Resolve a manifest or navigation href against the base path."""
    if is_external(href) or href.startswith("/"):
        return href
    return base + href


def strip_fragment(path: str) -> str:
    return path.split("#", 1)[0]


def resolve_resource(chapter_path: str, resource_ref: str) -> str:
    """Compute the canonical archive path of a resource used by a chapter.

    External URLs come back unchanged. Root-anchored references lose their
    leading slash. Everything else is joined onto the chapter's directory
    and collapsed, where ``..`` never climbs above the archive root.

    Examples:
        >>> resolve_resource("folder/ch1.xhtml", "../images/a.png")
        'images/a.png'
        >>> resolve_resource("a/b/ch.xhtml", "/root.png")
        'root.png'
    """
    if not resource_ref or is_external(resource_ref):
        return resource_ref

    ref = strip_fragment(resource_ref)
    if ref.startswith("/"):
        return ref[1:]

    parts: list[str] = []
    for segment in (base_path(chapter_path) + ref).split("/"):
        if segment == "..":
            if parts:
                parts.pop()
        elif segment in (".", ""):
            continue
        else:
            parts.append(segment)
    return "/".join(parts)
