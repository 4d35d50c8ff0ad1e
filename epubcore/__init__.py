"""epubcore - open EPUB packages and read their content.

This package provides:
    • open_package – open a local .epub and get a Package facade.
    • Package – reading order, manifest lookups and lazy decoding.
    • list_packages – the .epub files in a directory.
    • CLI utilities under epubcore.cli (Click) and an HTTP surface in epubcore.web (Flask).

Parsing is kept free of the CLI/web layers to ease testing.
"""

__all__ = [
    "open_package",
    "open_package_async",
    "list_packages",
    "Package",
    "PackageSource",
    "SourceKind",
    "ManifestItem",
    "SpineItemRef",
    "DecodeStrategy",
    "Document",
    "Image",
    "NoContent",
    "EpubError",
    "OpenError",
    "PackageLookupError",
]

from .errors import EpubError, OpenError, PackageLookupError  # noqa: E402
from .models import DecodeStrategy, Document, Image, ManifestItem, NoContent, SpineItemRef  # noqa: E402
from .package import Package, open_package, open_package_async  # noqa: E402
from .source import PackageSource, SourceKind, list_packages  # noqa: E402
