from pathlib import Path

import pytest

from epubcore.errors import UnsupportedSourceError
from epubcore.web import create_app

from .conftest import png_bytes


@pytest.fixture()
def client(sample_epub: Path):
    app = create_app(sample_epub)
    app.testing = True
    yield app.test_client()
    app.extensions["epubcore.package"].close()


def test_index(client):
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["reading_order_length"] == 15
    assert len(data["manifest"]) == 30
    assert data["spine"][0] == "ch01"


def test_page(client, first_chapter: str):
    resp = client.get("/page/0")
    assert resp.status_code == 200
    assert resp.headers["Content-Type"].startswith("application/xhtml+xml")
    assert resp.get_data(as_text=True) == first_chapter


def test_page_out_of_range(client):
    resp = client.get("/page/15")
    assert resp.status_code == 404
    assert resp.get_json()["kind"] == "index-out-of-bounds"


def test_resource(client):
    resp = client.get("/resource/images/img07.png")
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "image/png"
    assert resp.data == png_bytes(7)


def test_resource_unsupported(client):
    resp = client.get("/resource/styles/book.css")
    assert resp.status_code == 415
    assert resp.get_json()["kind"] == "unsupported"


def test_resource_missing(client):
    resp = client.get("/resource/nonexistent")
    assert resp.status_code == 404
    assert resp.get_json()["kind"] == "href-not-found"


def test_remote_source_rejected():
    with pytest.raises(UnsupportedSourceError):
        create_app("https://example.com/1.epub")


def test_resource_with_missing_entry(make_epub):
    opf = (
        "<package><manifest>"
        '<item id="a" href="a.xhtml" media-type="application/xhtml+xml"/>'
        '<item id="gone" href="gone.png" media-type="image/png"/>'
        "</manifest><spine><itemref idref='a'/><itemref idref='gone'/></spine></package>"
    )
    path = make_epub({"content.opf": opf, "a.xhtml": "<p/>"}, opf_path="content.opf")
    app = create_app(path)
    app.testing = True
    client = app.test_client()
    try:
        resp = client.get("/resource/gone.png")
        assert resp.status_code == 500
        assert resp.get_json()["kind"] == "entry-not-found"

        resp = client.get("/page/1")
        assert resp.status_code == 500
        assert resp.get_json()["kind"] == "entry-not-found"

        # lookups keep their own status
        assert client.get("/page/2").status_code == 404
        assert client.get("/page/0").status_code == 200
    finally:
        app.extensions["epubcore.package"].close()
