"""Package identifiers and directory listing.

A package can be named by a local path, a URL or a content address
(``0x``-prefixed hex).  All three are accepted as identifiers, but only local
paths can be opened for now.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List
from urllib.parse import urlparse

from .errors import ArchiveIOError, UnsupportedSourceError

__all__ = ["SourceKind", "PackageSource", "list_packages", "PACKAGE_SUFFIX"]

PACKAGE_SUFFIX = ".epub"

_CONTENT_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]+$")


class SourceKind(enum.Enum):
    LOCAL_PATH = "local-path"
    URL = "url"
    CONTENT_ADDRESS = "content-address"


@dataclass(frozen=True)
class PackageSource:
    kind: SourceKind
    value: str

    @classmethod
    def parse(cls, value: "str | Path | PackageSource") -> "PackageSource":
        if isinstance(value, PackageSource):
            return value
        if isinstance(value, Path):
            return cls(SourceKind.LOCAL_PATH, str(value))
        text = str(value).strip()
        if _CONTENT_ADDRESS_RE.match(text):
            return cls(SourceKind.CONTENT_ADDRESS, text)
        # single-letter schemes are Windows drive letters, not URLs
        scheme = urlparse(text).scheme
        if len(scheme) > 1 and text[len(scheme):].startswith("://"):
            return cls(SourceKind.URL, text)
        return cls(SourceKind.LOCAL_PATH, text)

    @property
    def is_local(self) -> bool:
        return self.kind is SourceKind.LOCAL_PATH

    def local_path(self) -> Path:
        if not self.is_local:
            raise UnsupportedSourceError(self)
        return Path(self.value).expanduser()

    def __str__(self) -> str:
        return self.value


def list_packages(directory: "str | Path | PackageSource") -> List[PackageSource]:
    """Return the package files directly inside *directory* (not recursive), sorted by name."""
    root = PackageSource.parse(directory).local_path()
    if not root.is_dir():
        raise ArchiveIOError(f"{root}: not a directory")
    return [
        PackageSource(SourceKind.LOCAL_PATH, str(p))
        for p in sorted(root.iterdir(), key=lambda p: p.name)
        if p.is_file() and p.suffix.lower() == PACKAGE_SUFFIX
    ]
