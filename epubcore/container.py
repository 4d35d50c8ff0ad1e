"""Find the package document through ``META-INF/container.xml``."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from .archive import Archive
from .errors import EntryNotFoundError, InvalidEncodingError, MissingRootfileError, XmlParseError

__all__ = ["CONTAINER_PATH", "locate_rootfile", "parse_container", "local_name"]

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


def local_name(tag) -> str:
    """``{namespace}name`` -> ``name``.  Comments and PIs have non-str tags."""
    if not isinstance(tag, str):
        return ""
    return tag.rpartition("}")[2]


def parse_container(xml_text: str) -> str:
    """Return ``full-path`` of the first ``rootfile`` element in *xml_text*.

    Additional rootfiles (multiple renditions) are ignored.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise XmlParseError(CONTAINER_PATH, str(e)) from e

    rootfile = next((el for el in root.iter() if local_name(el.tag) == "rootfile"), None)
    if rootfile is None:
        raise MissingRootfileError(f"{CONTAINER_PATH}: no <rootfile> element")
    full_path = rootfile.get("full-path")
    if not full_path:
        raise MissingRootfileError(f"{CONTAINER_PATH}: <rootfile> has no full-path attribute")
    return full_path


def locate_rootfile(archive: Archive) -> str:
    try:
        xml_text = archive.read_text(CONTAINER_PATH)
    except EntryNotFoundError as e:
        raise MissingRootfileError(f"{archive.path}: no {CONTAINER_PATH}") from e
    except InvalidEncodingError as e:
        raise XmlParseError(CONTAINER_PATH, str(e)) from e
    path = parse_container(xml_text)
    logger.debug("package document of %s is %s", archive.path, path)
    return path
