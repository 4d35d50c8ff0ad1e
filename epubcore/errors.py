"""Exception hierarchy for epubcore.

Errors fall into three families so that callers can tell "not a valid
package" from "page not found" from "cannot load remote packages yet":

* :class:`OpenError` – raised while building a :class:`~epubcore.package.Package`;
  no package object is ever returned when one of these is raised.
* :class:`PackageLookupError` – raised by a single lookup; the package stays usable.
* :class:`ItemError` – a manifest/spine child was rejected while parsing.  These
  are recorded on the parsed document instead of being raised.

Every class has a short ``kind`` string that is stable across releases.
"""
from __future__ import annotations

__all__ = [
    "EpubError",
    "OpenError",
    "ArchiveIOError",
    "ArchiveError",
    "XmlParseError",
    "MissingRootfileError",
    "InvalidManifestError",
    "InvalidSpineError",
    "UnsupportedSourceError",
    "ItemError",
    "MissingAttributeError",
    "InvalidMimeTypeError",
    "DuplicateIdError",
    "PackageLookupError",
    "IndexOutOfBoundsError",
    "IdrefNotFoundError",
    "HrefNotFoundError",
    "IdNotFoundError",
    "EntryNotFoundError",
    "InvalidEncodingError",
]


class EpubError(Exception):
    kind = "epub-error"


# construction-time


class OpenError(EpubError):
    kind = "open-error"


class ArchiveIOError(OpenError):
    """The container file could not be opened or read."""

    kind = "io-error"


class ArchiveError(OpenError):
    """The container is not a readable zip archive."""

    kind = "archive-error"


class XmlParseError(OpenError):
    kind = "xml-parse-error"

    def __init__(self, entry: str, reason: str):
        super().__init__(f"{entry}: malformed XML ({reason})")
        self.entry = entry
        self.reason = reason


class MissingRootfileError(OpenError):
    kind = "missing-rootfile"


class InvalidManifestError(OpenError):
    kind = "invalid-manifest"


class InvalidSpineError(OpenError):
    kind = "invalid-spine"


class UnsupportedSourceError(OpenError):
    """Remote URLs and content addresses are recognised but cannot be loaded."""

    kind = "unsupported-source"

    def __init__(self, source):
        super().__init__(f"loading packages from {source.kind.value} sources is not implemented: {source.value}")
        self.source = source


# per-item parse rejections


class ItemError(EpubError):
    kind = "item-error"

    def __init__(self, section: str, position: int, message: str):
        super().__init__(f"<{section}> child #{position}: {message}")
        self.section = section
        self.position = position


class MissingAttributeError(ItemError):
    kind = "missing-attribute"

    def __init__(self, section: str, position: int, attribute: str):
        super().__init__(section, position, f"missing attribute {attribute!r}")
        self.attribute = attribute


class InvalidMimeTypeError(ItemError):
    kind = "invalid-mime-type"

    def __init__(self, value: str, reason: str, section: str = "manifest", position: int = -1):
        super().__init__(section, position, f"invalid media type {value!r} ({reason})")
        self.value = value
        self.reason = reason


class DuplicateIdError(ItemError):
    kind = "duplicate-id"

    def __init__(self, section: str, position: int, item_id: str):
        super().__init__(section, position, f"duplicate id {item_id!r}, first occurrence kept")
        self.item_id = item_id


# per-lookup


class PackageLookupError(EpubError, LookupError):
    kind = "lookup-error"


class IndexOutOfBoundsError(PackageLookupError, IndexError):
    kind = "index-out-of-bounds"

    def __init__(self, index: int, length: int):
        super().__init__(f"reading-order index {index} out of range (length {length})")
        self.index = index
        self.length = length


class IdrefNotFoundError(PackageLookupError):
    kind = "idref-not-found"

    def __init__(self, index: int, idref: str):
        super().__init__(f"spine entry {index} references unknown manifest id {idref!r}")
        self.index = index
        self.idref = idref


class HrefNotFoundError(PackageLookupError):
    kind = "href-not-found"

    def __init__(self, href: str):
        super().__init__(f"no manifest item with href {href!r}")
        self.href = href


class IdNotFoundError(PackageLookupError):
    kind = "id-not-found"

    def __init__(self, item_id: str):
        super().__init__(f"no manifest item with id {item_id!r}")
        self.item_id = item_id


# read-time


class EntryNotFoundError(EpubError):
    kind = "entry-not-found"

    def __init__(self, entry: str):
        super().__init__(f"archive has no entry {entry!r}")
        self.entry = entry


class InvalidEncodingError(EpubError):
    kind = "invalid-encoding"

    def __init__(self, entry: str, reason: str):
        super().__init__(f"{entry}: not valid UTF-8 ({reason})")
        self.entry = entry
