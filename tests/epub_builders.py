"""In-memory EPUB fixture builders shared by the test suite."""

import io
import struct
import zipfile

CONTAINER_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container" version="1.0">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

XHTML = "application/xhtml+xml"
NCX = "application/x-dtbncx+xml"


def build_opf(
    items: list[tuple[str, str, str]],
    spine: list[str],
    title: str | None = "Test Book",
    authors: tuple[str, ...] = ("Jane Doe",),
) -> str:
    """Build a package document.

    items: [(manifest_id, href, media_type), ...]
    spine: [idref, ...]
    """
    manifest = "\n".join(
        f'    <item id="{mid}" href="{href}" media-type="{mtype}"/>'
        for mid, href, mtype in items
    )
    spine_refs = "\n".join(f'    <itemref idref="{idref}"/>' for idref in spine)
    meta = []
    if title:
        meta.append(f"    <dc:title>{title}</dc:title>")
    meta.extend(f"    <dc:creator>{a}</dc:creator>" for a in authors)
    meta.append("    <dc:language>en</dc:language>")

    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf"
         xmlns:dc="http://purl.org/dc/elements/1.1/"
         version="3.0">
  <metadata>
{chr(10).join(meta)}
  </metadata>
  <manifest>
{manifest}
  </manifest>
  <spine>
{spine_refs}
  </spine>
</package>"""


def build_chapter(body: str, title: str = "Chapter") -> str:
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>{title}</title></head>
<body>
{body}
</body>
</html>"""


def build_nav(entries: list[tuple[str, str]]) -> str:
    """entries: [(label, href), ...]"""
    li_items = "\n".join(
        f'      <li><a href="{href}">{label}</a></li>' for label, href in entries
    )
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">
<head><title>Contents</title></head>
<body>
  <nav epub:type="toc">
    <ol>
{li_items}
    </ol>
  </nav>
</body>
</html>"""


def build_ncx(entries: list[tuple[str, str]]) -> str:
    """entries: [(label, src), ...]"""
    points = "\n".join(
        f"""\
    <navPoint id="np{i}" playOrder="{i + 1}">
      <navLabel><text>{label}</text></navLabel>
      <content src="{src}"/>
    </navPoint>"""
        for i, (label, src) in enumerate(entries)
    )
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <navMap>
{points}
  </navMap>
</ncx>"""


def make_epub(
    files: dict[str, str | bytes],
    opf_path: str = "OEBPS/content.opf",
    container: bool = True,
) -> bytes:
    """Build an EPUB zip in memory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("mimetype", "application/epub+zip")
        if container:
            zf.writestr("META-INF/container.xml", CONTAINER_XML.format(opf_path=opf_path))
        for path, content in files.items():
            zf.writestr(path, content)
    return buf.getvalue()


def corrupt_entry(data: bytes, name: str) -> bytes:
    """Damage the deflate stream of one entry, leaving the zip directory intact.

    The first byte of the stream is given the reserved block type, so
    decompressing the entry fails while every other entry still reads.
    """
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        info = zf.getinfo(name)
    assert info.compress_type == zipfile.ZIP_DEFLATED

    offset = info.header_offset
    name_len, extra_len = struct.unpack("<HH", data[offset + 26 : offset + 30])
    start = offset + 30 + name_len + extra_len

    damaged = bytearray(data)
    damaged[start] |= 0b110
    return bytes(damaged)


CHAPTER_BODIES = [
    "<h1>Loomings</h1><p>Call me Ishmael. Some years ago, never mind how long.</p>",
    '<h1>The Carpet-Bag</h1><p id="s1">I stuffed a shirt or two into my old carpet-bag.</p>',
    "<h1>The Spouter-Inn</h1><p>Entering that gable-ended Spouter-Inn, you found yourself.</p>",
]


def three_chapter_files(
    nav: str | None = "modern",
    extra_spine: tuple[str, ...] = (),
) -> dict[str, str | bytes]:
    """Files for a 3-chapter package under OEBPS/.

    nav: "modern" (nav.xhtml), "legacy" (toc.ncx), "both" or None.
    extra_spine: additional idrefs appended to the spine, e.g. dangling ones.
    """
    items = [
        ("ch1", "text/ch1.xhtml", XHTML),
        ("ch2", "text/ch2.xhtml", XHTML),
        ("ch3", "text/ch3.xhtml", XHTML),
    ]
    files: dict[str, str | bytes] = {
        f"OEBPS/text/ch{i + 1}.xhtml": build_chapter(body, title=f"Chapter {i + 1}")
        for i, body in enumerate(CHAPTER_BODIES)
    }
    toc = [
        ("Loomings", "text/ch1.xhtml"),
        ("The Carpet-Bag", "text/ch2.xhtml#s1"),
        ("The Spouter-Inn", "text/ch3.xhtml"),
    ]

    if nav in ("modern", "both"):
        items.append(("nav", "nav.xhtml", XHTML))
        files["OEBPS/nav.xhtml"] = build_nav(toc)
    if nav in ("legacy", "both"):
        items.append(("ncx", "toc.ncx", NCX))
        files["OEBPS/toc.ncx"] = build_ncx(toc)

    spine = ["ch1", "ch2", "ch3", *extra_spine]
    files["OEBPS/content.opf"] = build_opf(items, spine, title="Moby-Dick", authors=("Herman Melville",))
    return files
