"""The :class:`Package` facade and :func:`open_package`.

>>> with open_package("book.epub") as book:
...     first = book.read_by_index(0)
...     cover = book.read_by_href("images/cover.png")
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .archive import Archive, open_archive
from .container import locate_rootfile
from .errors import (
    EntryNotFoundError,
    IdNotFoundError,
    IdrefNotFoundError,
    IndexOutOfBoundsError,
    InvalidEncodingError,
    ItemError,
    MissingRootfileError,
    XmlParseError,
)
from .models import DecodedContent, ManifestItem, PackageDocument, SpineItemRef
from .parser import PackageDocumentParser
from .resolver import ResourceResolver
from .source import PackageSource

__all__ = ["Package", "open_package", "open_package_async"]

logger = logging.getLogger(__name__)


class Package:
    """An opened package: manifest, reading order and lazy content access.

    Created by :func:`open_package`; owns the archive until :meth:`close`.
    """

    def __init__(self, source: PackageSource, archive: Archive, document: PackageDocument, *, cache: bool = True):
        self.source = source
        self._archive = archive
        self._document = document
        self._resolver = ResourceResolver(archive, document, cache=cache)

    def __enter__(self) -> "Package":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __len__(self) -> int:
        return self.reading_order_length()

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Package {self.source} spine={len(self._document.spine)} manifest={len(self._document.manifest)}>"

    def close(self) -> None:
        self._archive.close()

    # read-only views
    @property
    def path(self) -> str:
        """Location of the package document inside the archive."""
        return self._document.path

    @property
    def manifest(self) -> Tuple[ManifestItem, ...]:
        return self._document.manifest

    @property
    def spine(self) -> Tuple[SpineItemRef, ...]:
        return self._document.spine

    @property
    def rejected(self) -> Tuple[ItemError, ...]:
        return self._document.rejected

    # operations
    def reading_order_length(self) -> int:
        return len(self._document.spine)

    def lookup_by_id(self, item_id: str) -> ManifestItem:
        return self._resolver.by_id(item_id)

    def read_by_index(self, index: int) -> DecodedContent:
        spine = self._document.spine
        if not 0 <= index < len(spine):
            raise IndexOutOfBoundsError(index, len(spine))
        idref = spine[index].idref
        try:
            item = self._resolver.by_id(idref)
        except IdNotFoundError:
            raise IdrefNotFoundError(index, idref) from None
        return self._resolver.read(item)

    def read_by_href(self, href: str, relative_to: Optional[str] = None) -> DecodedContent:
        """Read the manifest item at *href*, independent of the reading order.

        *relative_to* is the href of the document that contains the reference,
        for resolving e.g. ``<img src="../images/a.png">`` found in a chapter.
        """
        return self._resolver.read(self._resolver.by_href(href, relative_to))

    def reading_order(self) -> Iterator[DecodedContent]:
        for index in range(self.reading_order_length()):
            yield self.read_by_index(index)


def open_package(source: "str | Path | PackageSource", *, cache: bool = True, preload: bool = False) -> Package:
    """Open *source* and return a ready :class:`Package`.

    ``preload=True`` decodes every manifest item up front (and implies
    ``cache=True``); a missing or undecodable item then fails the whole open.
    """
    src = PackageSource.parse(source)
    path = src.local_path()

    archive = open_archive(path)
    try:
        opf_path = locate_rootfile(archive)
        try:
            opf_text = archive.read_text(opf_path)
        except EntryNotFoundError as e:
            raise MissingRootfileError(f"{path}: rootfile {opf_path!r} is not in the archive") from e
        except InvalidEncodingError as e:
            raise XmlParseError(opf_path, str(e)) from e
        document = PackageDocumentParser().parse(opf_text, path=opf_path)
        package = Package(src, archive, document, cache=cache or preload)
        if preload:
            package._resolver.preload()
    except BaseException:
        archive.close()
        raise

    logger.debug(
        "opened %s: %d spine entries, %d manifest items, %d rejected",
        path,
        len(document.spine),
        len(document.manifest),
        len(document.rejected),
    )
    return package


async def open_package_async(source: "str | Path | PackageSource", *, cache: bool = True, preload: bool = False) -> Package:
    """:func:`open_package` on a worker thread; resolves once parsing is done."""
    return await asyncio.to_thread(open_package, source, cache=cache, preload=preload)
