"""Plain data objects shared by the parser, the resolver and the package facade."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Tuple, Union

from .errors import ItemError
from .mediatype import MediaType

__all__ = [
    "DecodeStrategy",
    "ManifestItem",
    "SpineItemRef",
    "PackageDocument",
    "Document",
    "Image",
    "NoContent",
    "DecodedContent",
]


class DecodeStrategy(enum.Enum):
    DOCUMENT = "document"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ManifestItem:
    id: str
    href: str  # as declared in the package document
    path: str  # archive entry, resolved against the package document's directory
    media_type: MediaType
    strategy: DecodeStrategy

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ManifestItem {self.id} {self.href} {self.media_type.essence}>"


@dataclass(frozen=True)
class SpineItemRef:
    idref: str
    linear: bool = True


@dataclass(frozen=True)
class PackageDocument:
    """Result of parsing the package document.

    ``rejected`` keeps the manifest/spine children that were skipped, in
    document order, so callers can report them.
    """

    path: str
    manifest: Tuple[ManifestItem, ...]
    spine: Tuple[SpineItemRef, ...]
    rejected: Tuple[ItemError, ...] = field(default=())

    @property
    def base_dir(self) -> str:
        return self.path.rpartition("/")[0]


# decoded content – a closed set of three variants


@dataclass(frozen=True)
class Document:
    item: ManifestItem
    text: str
    kind = DecodeStrategy.DOCUMENT


@dataclass(frozen=True)
class Image:
    item: ManifestItem
    data: bytes
    kind = DecodeStrategy.IMAGE


@dataclass(frozen=True)
class NoContent:
    """An item whose media type is neither XHTML nor an image; nothing was read."""

    item: ManifestItem
    kind = DecodeStrategy.UNSUPPORTED


DecodedContent = Union[Document, Image, NoContent]
