"""
Random-access reads from the zip container of a package.

``zipfile.ZipFile`` keeps a single file object with one read position, so an
:class:`Archive` funnels every read through a lock.  Callers never get at the
underlying ``ZipFile``.
"""
from __future__ import annotations

import logging
import threading
import zipfile
import zlib
from pathlib import Path
from typing import List

from .errors import ArchiveError, ArchiveIOError, EntryNotFoundError, InvalidEncodingError

__all__ = ["Archive", "open_archive"]

logger = logging.getLogger(__name__)


class Archive:
    """An open zip container.

    Use :func:`open_archive` to create one.  Works as a context manager.
    """

    def __init__(self, zf: zipfile.ZipFile, path: Path):
        self._zf = zf
        self._lock = threading.Lock()
        self.path = path

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Archive {self.path}>"

    @property
    def closed(self) -> bool:
        return self._zf.fp is None

    def close(self) -> None:
        with self._lock:
            self._zf.close()

    def names(self) -> List[str]:
        """Entry names in archive order, directories excluded."""
        with self._lock:
            return [n for n in self._zf.namelist() if not n.endswith("/")]

    def read_bytes(self, entry: str) -> bytes:
        name = entry.lstrip("/")
        with self._lock:
            try:
                data = self._zf.read(name)
            except KeyError:
                raise EntryNotFoundError(name) from None
            except (zipfile.BadZipFile, zlib.error, EOFError) as e:
                raise ArchiveError(f"{self.path}: corrupt entry {name!r} ({e})") from e
            except NotImplementedError as e:
                # unsupported compression method
                raise ArchiveError(f"{self.path}: cannot decompress {name!r} ({e})") from e
            except ValueError as e:
                # "Attempt to use ZIP archive that was already closed"
                raise ArchiveIOError(f"{self.path}: {e}") from e
            except OSError as e:
                raise ArchiveIOError(f"{self.path}: {e}") from e
        logger.debug("read %s (%d bytes) from %s", name, len(data), self.path)
        return data

    def read_text(self, entry: str) -> str:
        data = self.read_bytes(entry)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(entry.lstrip("/"), str(e)) from e


def open_archive(path: Path | str) -> Archive:
    """Open *path* as a zip container.

    Raises :class:`ArchiveIOError` when the file cannot be opened and
    :class:`ArchiveError` when it is not a zip archive.
    """
    path = Path(path).expanduser()
    try:
        zf = zipfile.ZipFile(path)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"{path}: not a zip archive ({e})") from e
    except OSError as e:
        raise ArchiveIOError(f"{path}: {e.strerror or e}") from e
    logger.debug("opened %s (%d entries)", path, len(zf.namelist()))
    return Archive(zf, path)
