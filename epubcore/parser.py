"""Parser for the package document (the ``.opf`` file).

Only the ``manifest`` and ``spine`` sections are read.  Malformed children
are skipped one at a time and remembered on the result; a section fails as a
whole only when nothing usable is left in it.

Example:
>>> doc = PackageDocumentParser().parse(opf_text, path="OEBPS/content.opf")
>>> [ref.idref for ref in doc.spine]
['cover', 'ch01', 'ch02']
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Tuple

from .container import local_name
from .errors import (
    DuplicateIdError,
    InvalidManifestError,
    InvalidMimeTypeError,
    InvalidSpineError,
    ItemError,
    MissingAttributeError,
    XmlParseError,
)
from .mediatype import parse_media_type
from .models import ManifestItem, PackageDocument, SpineItemRef
from .resolver import classify, resolve_href

__all__ = ["PackageDocumentParser"]

logger = logging.getLogger(__name__)


class PackageDocumentParser:
    """Parse package document text into a :class:`PackageDocument`."""

    MANIFEST_ATTRIBUTES = ("id", "href", "media-type")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    def parse(self, xml_text: str, path: str = "") -> PackageDocument:
        """Parse *xml_text*; *path* is the document's location inside the archive.

        Item hrefs are resolved against the directory of *path*.
        """
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            raise XmlParseError(path or "package document", str(e)) from e

        base_dir = path.rpartition("/")[0]
        manifest: List[ManifestItem] | None = None
        spine: List[SpineItemRef] | None = None
        rejected: List[ItemError] = []

        for section in root:
            name = local_name(section.tag)
            if name == "manifest":
                manifest = self._parse_manifest(section, base_dir, rejected)
            elif name == "spine":
                spine = self._parse_spine(section, rejected)

        for err in rejected:
            logger.warning("%s: skipped %s", path or "package document", err)

        if not manifest:
            raise InvalidManifestError(f"{path or 'package document'}: <manifest> has no usable items")
        if not spine:
            raise InvalidSpineError(f"{path or 'package document'}: <spine> has no usable itemrefs")

        logger.debug("%s: %d manifest items, %d spine entries", path, len(manifest), len(spine))
        return PackageDocument(
            path=path,
            manifest=tuple(manifest),
            spine=tuple(spine),
            rejected=tuple(rejected),
        )

    # ------------------------------------------------------------------
    # Section helpers
    # ------------------------------------------------------------------

    def _parse_manifest(self, section: ET.Element, base_dir: str, rejected: List[ItemError]) -> List[ManifestItem]:
        items: List[ManifestItem] = []
        seen_ids: set[str] = set()
        for position, child in enumerate(self._children(section)):
            try:
                item = self._manifest_item(child, position, base_dir)
            except ItemError as e:
                rejected.append(e)
                continue
            if item.id in seen_ids:
                # first occurrence wins
                rejected.append(DuplicateIdError("manifest", position, item.id))
                continue
            seen_ids.add(item.id)
            items.append(item)
        return items

    def _manifest_item(self, el: ET.Element, position: int, base_dir: str) -> ManifestItem:
        item_id, href, raw_type = self._require(el, "manifest", position, self.MANIFEST_ATTRIBUTES)
        try:
            media_type = parse_media_type(raw_type)
        except InvalidMimeTypeError as e:
            raise InvalidMimeTypeError(e.value, e.reason, "manifest", position) from None
        return ManifestItem(
            id=item_id,
            href=href,
            path=resolve_href(base_dir, href),
            media_type=media_type,
            strategy=classify(media_type),
        )

    def _parse_spine(self, section: ET.Element, rejected: List[ItemError]) -> List[SpineItemRef]:
        refs: List[SpineItemRef] = []
        for position, child in enumerate(self._children(section)):
            try:
                (idref,) = self._require(child, "spine", position, ("idref",))
            except ItemError as e:
                rejected.append(e)
                continue
            refs.append(SpineItemRef(idref=idref, linear=child.get("linear", "yes").strip() != "no"))
        return refs

    # -------------------------- small helpers --------------------------

    @staticmethod
    def _children(section: ET.Element):
        return [c for c in section if isinstance(c.tag, str)]

    @staticmethod
    def _require(el: ET.Element, section: str, position: int, names) -> Tuple[str, ...]:
        values = []
        for attr in names:
            value = el.get(attr)
            if value is None or not value.strip():
                raise MissingAttributeError(section, position, attr)
            values.append(value.strip())
        return tuple(values)
