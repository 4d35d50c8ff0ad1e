"""Flask HTTP surface for a single package.

The package is opened once when the app is created.  The development server
handles requests on several threads; the package's archive lock serialises
their reads.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path

from flask import Flask, Response, jsonify, send_file

from .errors import EpubError, PackageLookupError
from .models import DecodedContent, Document, Image
from .package import open_package
from .source import PackageSource

logger = logging.getLogger(__name__)


def _respond(content: DecodedContent) -> Response:
    if isinstance(content, Document):
        return Response(content.text, mimetype="application/xhtml+xml")
    if isinstance(content, Image):
        return send_file(io.BytesIO(content.data), mimetype=content.item.media_type.essence)
    resp = jsonify(
        error=f"{content.item.id} has unsupported media type {content.item.media_type.essence}",
        kind=content.kind.value,
    )
    resp.status_code = 415
    return resp


def create_app(source: "str | Path | PackageSource", *, preload: bool = False) -> Flask:
    app = Flask(__name__)
    book = open_package(source, preload=preload)
    app.extensions["epubcore.package"] = book

    @app.errorhandler(PackageLookupError)
    def not_found(e: PackageLookupError):
        logger.error("%s", e)
        resp = jsonify(error=str(e), kind=e.kind)
        resp.status_code = 404
        return resp

    @app.errorhandler(EpubError)
    def read_failed(e: EpubError):
        # missing entry, bad encoding or corrupt member behind a valid manifest item
        logger.error("%s", e)
        resp = jsonify(error=str(e), kind=e.kind)
        resp.status_code = 500
        return resp

    @app.route("/")
    def index():
        return jsonify(
            source=str(book.source),
            package_document=book.path,
            reading_order_length=book.reading_order_length(),
            spine=[ref.idref for ref in book.spine],
            manifest=[
                {
                    "id": item.id,
                    "href": item.href,
                    "media_type": item.media_type.essence,
                    "kind": item.strategy.value,
                }
                for item in book.manifest
            ],
        )

    @app.route("/page/<int:index>")
    def page(index: int):
        return _respond(book.read_by_index(index))

    @app.route("/resource/<path:href>")
    def resource(href: str):
        return _respond(book.read_by_href(href))

    return app
