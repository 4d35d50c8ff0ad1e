import pytest

from epubcore.archive import open_archive
from epubcore.errors import EntryNotFoundError, HrefNotFoundError, IdNotFoundError, InvalidEncodingError
from epubcore.mediatype import parse_media_type
from epubcore.models import DecodeStrategy, Document, Image, NoContent
from epubcore.parser import PackageDocumentParser
from epubcore.resolver import ResourceResolver, classify, resolve_href

from .conftest import png_bytes


@pytest.mark.parametrize(
    "value, expected",
    [
        ("application/xhtml+xml", DecodeStrategy.DOCUMENT),
        ("application/xhtml+xml; charset=utf-8", DecodeStrategy.DOCUMENT),
        ("image/png", DecodeStrategy.IMAGE),
        ("image/svg+xml", DecodeStrategy.IMAGE),
        ("application/xml", DecodeStrategy.UNSUPPORTED),
        ("text/html", DecodeStrategy.UNSUPPORTED),
        ("application/x-dtbncx+xml", DecodeStrategy.UNSUPPORTED),
    ],
)
def test_classify(value, expected):
    assert classify(parse_media_type(value)) is expected


def test_resolve_href():
    assert resolve_href("OEBPS", "text/ch01.xhtml") == "OEBPS/text/ch01.xhtml"
    assert resolve_href("OEBPS/text", "../images/a%20b.png#frag") == "OEBPS/images/a b.png"
    assert resolve_href("", "content.xhtml") == "content.xhtml"
    assert resolve_href("OEBPS", "#only-fragment") == ""
    # absolute hrefs stay under the package document's directory
    assert resolve_href("OEBPS", "/images/a.png") == "OEBPS/images/a.png"
    assert resolve_href("", "/images/a.png") == "images/a.png"


def _resolver(archive, *, cache=True):
    opf = archive.read_text("OEBPS/content.opf")
    return ResourceResolver(archive, PackageDocumentParser().parse(opf, path="OEBPS/content.opf"), cache=cache)


def test_lookups(sample_epub):
    with open_archive(sample_epub) as archive:
        resolver = _resolver(archive)
        assert len(resolver) == 30
        assert resolver.by_id("img03").href == "images/img03.png"
        assert resolver.by_href("images/img03.png").id == "img03"
        assert resolver.by_href("../images/img03.png", relative_to="text/ch03.xhtml").id == "img03"
        with pytest.raises(IdNotFoundError):
            resolver.by_id("nope")
        with pytest.raises(HrefNotFoundError):
            resolver.by_href("nonexistent")


def test_read_variants(sample_epub):
    with open_archive(sample_epub) as archive:
        resolver = _resolver(archive)
        doc = resolver.read(resolver.by_id("ch02"))
        assert isinstance(doc, Document)
        assert "Chapter 2" in doc.text

        img = resolver.read(resolver.by_id("img02"))
        assert isinstance(img, Image)
        assert img.data == png_bytes(2)

        none = resolver.read(resolver.by_id("css"))
        assert isinstance(none, NoContent)
        assert none.kind is DecodeStrategy.UNSUPPORTED


def test_cache_returns_same_object(sample_epub):
    with open_archive(sample_epub) as archive:
        cached = _resolver(archive)
        item = cached.by_id("ch01")
        assert cached.read(item) is cached.read(item)

        uncached = _resolver(archive, cache=False)
        first, second = uncached.read(item), uncached.read(item)
        assert first is not second
        assert first == second


def test_preload_reads_everything_once(sample_epub):
    with open_archive(sample_epub) as archive:
        resolver = _resolver(archive)
        resolver.preload()
    # archive closed: only cached content is still reachable
    assert resolver.read(resolver.by_id("img14")).data == png_bytes(14)


def test_missing_entry_is_raised_on_read(make_epub):
    opf = (
        "<package><manifest>"
        '<item id="a" href="missing.xhtml" media-type="application/xhtml+xml"/>'
        "</manifest><spine><itemref idref='a'/></spine></package>"
    )
    path = make_epub({"content.opf": opf}, opf_path="content.opf")
    with open_archive(path) as archive:
        resolver = ResourceResolver(archive, PackageDocumentParser().parse(opf, path="content.opf"))
        with pytest.raises(EntryNotFoundError):
            resolver.read(resolver.by_id("a"))


def test_document_must_be_utf8(make_epub):
    opf = (
        "<package><manifest>"
        '<item id="a" href="a.xhtml" media-type="application/xhtml+xml"/>'
        "</manifest><spine><itemref idref='a'/></spine></package>"
    )
    path = make_epub({"content.opf": opf, "a.xhtml": "<p>café</p>".encode("latin-1")}, opf_path="content.opf")
    with open_archive(path) as archive:
        resolver = ResourceResolver(archive, PackageDocumentParser().parse(opf, path="content.opf"))
        with pytest.raises(InvalidEncodingError):
            resolver.read(resolver.by_id("a"))
