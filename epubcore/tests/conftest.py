"""Pytest configuration and sample packages for epubcore tests."""
from __future__ import annotations

import sys
import zipfile
from pathlib import Path

import pytest

# Ensure project root is importable
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml" />
  </rootfiles>
</container>"""

CHAPTER_XHTML = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>Chapter {n}</title></head>
<body><h1>Chapter {n}</h1><p>Ünïcödé text of chapter {n}.</p><img src="../images/img{n:02d}.png"/></body>
</html>"""

CHAPTERS = 15
IMAGES = 14


def png_bytes(n: int) -> bytes:
    return b"\x89PNG\r\n\x1a\n" + bytes([n]) * 16


def sample_opf() -> str:
    items = [
        f'<item id="ch{n:02d}" href="text/ch{n:02d}.xhtml" media-type="application/xhtml+xml"/>'
        for n in range(1, CHAPTERS + 1)
    ]
    items += [f'<item id="img{n:02d}" href="images/img{n:02d}.png" media-type="image/png"/>' for n in range(1, IMAGES + 1)]
    items.append('<item id="css" href="styles/book.css" media-type="text/css"/>')
    itemrefs = [f'<itemref idref="ch{n:02d}"/>' for n in range(1, CHAPTERS + 1)]
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">\n'
        '<metadata xmlns:dc="http://purl.org/dc/elements/1.1/"><dc:title>Sample</dc:title></metadata>\n'
        f"<manifest>{''.join(items)}</manifest>\n"
        f"<spine>{''.join(itemrefs)}</spine>\n"
        "</package>"
    )


def write_epub(path: Path, files: dict[str, "str | bytes"], *, opf_path: str | None = "OEBPS/content.opf") -> Path:
    """Write a zip at *path*; a container.xml pointing at *opf_path* is added unless given."""
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        if opf_path is not None and "META-INF/container.xml" not in files:
            zf.writestr("META-INF/container.xml", CONTAINER_XML.format(opf_path=opf_path))
        for name, data in files.items():
            zf.writestr(name, data)
    return path


@pytest.fixture()
def make_epub(tmp_path: Path):
    """Factory: ``make_epub(files, name="book.epub", opf_path=...)``."""

    def _make(files: dict[str, "str | bytes"], name: str = "book.epub", **kwargs) -> Path:
        return write_epub(tmp_path / name, files, **kwargs)

    return _make


@pytest.fixture()
def sample_epub(tmp_path: Path) -> Path:
    """15 chapters, 14 images and a stylesheet under ``OEBPS/``."""
    files: dict[str, "str | bytes"] = {"OEBPS/content.opf": sample_opf()}
    for n in range(1, CHAPTERS + 1):
        files[f"OEBPS/text/ch{n:02d}.xhtml"] = CHAPTER_XHTML.format(n=n)
    for n in range(1, IMAGES + 1):
        files[f"OEBPS/images/img{n:02d}.png"] = png_bytes(n)
    files["OEBPS/styles/book.css"] = "body { margin: 0 }"
    return write_epub(tmp_path / "sample.epub", files)


@pytest.fixture()
def first_chapter() -> str:
    return CHAPTER_XHTML.format(n=1)
