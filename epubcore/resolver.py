"""
Turns manifest items into decoded content.

Each item's decode strategy is fixed when the package document is parsed
(see :func:`classify`):

    application/xhtml+xml   -> DOCUMENT  (UTF-8 text)
    image/*                 -> IMAGE     (raw bytes)
    anything else           -> UNSUPPORTED (explicit NoContent, archive untouched)

:class:`ResourceResolver` indexes the items of one package by id and by
href and reads their bytes from the archive only when asked.
"""
from __future__ import annotations

import logging
import posixpath
import threading
from typing import Dict, Optional
from urllib.parse import unquote

from .archive import Archive
from .errors import EntryNotFoundError, HrefNotFoundError, IdNotFoundError, InvalidEncodingError
from .mediatype import MediaType
from .models import DecodedContent, DecodeStrategy, Document, Image, ManifestItem, NoContent, PackageDocument

__all__ = [
    "ResourceResolver",
    "classify",
    "materialize",
    "resolve_href",
]

logger = logging.getLogger(__name__)


def classify(media_type: MediaType) -> DecodeStrategy:
    if media_type.type == "application" and media_type.subtype == "xhtml" and media_type.suffix == "xml":
        return DecodeStrategy.DOCUMENT
    if media_type.type == "image":
        return DecodeStrategy.IMAGE
    return DecodeStrategy.UNSUPPORTED


def resolve_href(base_dir: str, href: str) -> str:
    """Archive entry path for *href* relative to *base_dir*.

    The fragment is dropped and percent-escapes are decoded.  The result is
    never re-rooted at the archive root: a leading ``/`` is ignored and
    ``../`` only climbs out of *base_dir*.
    """
    path = unquote(href.partition("#")[0]).lstrip("/")
    if not path:
        return ""
    joined = posixpath.join(base_dir, path) if base_dir else path
    return posixpath.normpath(joined).lstrip("/")


def materialize(archive: Archive, item: ManifestItem) -> DecodedContent:
    """Read and decode *item* from *archive* according to its strategy."""
    if item.strategy is DecodeStrategy.DOCUMENT:
        data = archive.read_bytes(item.path)
        try:
            return Document(item, data.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(item.path, str(e)) from e
    if item.strategy is DecodeStrategy.IMAGE:
        return Image(item, archive.read_bytes(item.path))
    return NoContent(item)


class ResourceResolver:
    """Lookup and lazy decoding of the manifest items of one package.

    Parameters
    ----------
    archive: Archive
        Open container the items live in.
    document: PackageDocument
        Parsed package document.
    cache: bool, default ``True``
        Keep decoded content so repeated reads do not decompress again.
    """

    def __init__(self, archive: Archive, document: PackageDocument, *, cache: bool = True):
        self._archive = archive
        self._document = document
        self._cache_enabled = cache
        self._cache: Dict[str, DecodedContent] = {}
        self._lock = threading.Lock()

        self._by_id: Dict[str, ManifestItem] = {}
        self._by_path: Dict[str, ManifestItem] = {}
        for item in document.manifest:
            self._by_id.setdefault(item.id, item)
            if item.path in self._by_path:
                logger.debug("%s: href %s listed twice, keeping %s", document.path, item.href, self._by_path[item.path].id)
                continue
            self._by_path[item.path] = item

    def __len__(self) -> int:
        return len(self._by_id)

    # lookups
    def by_id(self, item_id: str) -> ManifestItem:
        try:
            return self._by_id[item_id]
        except KeyError:
            raise IdNotFoundError(item_id) from None

    def by_href(self, href: str, relative_to: Optional[str] = None) -> ManifestItem:
        """Find the item for *href*.

        Without *relative_to*, *href* is taken relative to the package document
        like the manifest's own hrefs.  With it, *href* is resolved against the
        directory of the referencing item (e.g. an ``<img src>`` inside a chapter).
        """
        base_dir = self._document.base_dir
        if relative_to is not None:
            base_dir = posixpath.dirname(resolve_href(base_dir, relative_to))
        path = resolve_href(base_dir, href)
        item = self._by_path.get(path)
        if item is None:
            raise HrefNotFoundError(href)
        return item

    # content
    def read(self, item: ManifestItem) -> DecodedContent:
        if not self._cache_enabled:
            return self._materialize(item)
        with self._lock:
            content = self._cache.get(item.id)
            if content is None:
                content = self._materialize(item)
                self._cache[item.id] = content
            return content

    def preload(self) -> None:
        """Decode every manifest item now (eager variant of :meth:`read`)."""
        for item in self._by_id.values():
            self.read(item)
        logger.debug("%s: preloaded %d items", self._document.path, len(self._by_id))

    def _materialize(self, item: ManifestItem) -> DecodedContent:
        try:
            return materialize(self._archive, item)
        except EntryNotFoundError:
            logger.warning("manifest item %s points to missing entry %s", item.id, item.path)
            raise
