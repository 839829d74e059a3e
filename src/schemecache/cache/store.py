"""File-backed storage for cache entries.

This module defines the storage seam used by
:class:`~schemecache.client.CacheTransport`:

- :class:`CacheStore` -- the abstract base class every storage backend
  extends.  A read either returns a :class:`~schemecache.models.CacheEntry`
  or ``None`` when nothing is stored under the key; every other failure is
  raised as :class:`~schemecache.exceptions.CacheStorageError`.
- :class:`FileCacheStore` -- one file per key inside a root directory.
  The entry's modification time comes from the filesystem, not from the
  stored bytes.

Writes go through a temp file in the same directory followed by
:func:`os.replace`, so a concurrent reader sees either the previous
complete entry or the new one.  Racing writers are not serialised; the
last rename wins.
"""

from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from schemecache.exceptions import CacheStorageError, ConfigError
from schemecache.models import CacheEntry

_DIR_MODE = 0o755
_FILE_MODE = 0o644


class CacheStore(ABC):
    """Abstract key/value store for cached response bodies."""

    @abstractmethod
    def read(self, key: str) -> Optional[CacheEntry]:
        """Return the entry stored under *key*, or ``None`` if there is none.

        Raises:
            CacheStorageError: If the entry exists but cannot be read.
        """
        ...

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Atomically replace the entry stored under *key* with *data*.

        Raises:
            CacheStorageError: If the entry cannot be written.
        """
        ...


class FileCacheStore(CacheStore):
    """Stores each entry as ``<directory>/<key>``.

    The directory (and any missing parents) is created on construction.

    Args:
        directory: Root directory for cache entries.

    Raises:
        ConfigError: If the directory cannot be created.

    Example::

        store = FileCacheStore("/tmp/http-cache")
        store.write(cache_key("https://example.com/feed.xml"), b"<rss/>")
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        try:
            self._directory.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"create cache directory: {exc}") from exc

    @property
    def directory(self) -> Path:
        """The root directory holding cache entries."""
        return self._directory

    def path_for(self, key: str) -> Path:
        """Return the file path that holds the entry for *key*."""
        return self._directory / key

    def read(self, key: str) -> Optional[CacheEntry]:
        path = self.path_for(key)
        try:
            with path.open("rb") as fh:
                info = os.fstat(fh.fileno())
                data = fh.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheStorageError(f"read cache entry {path}: {exc}") from exc

        return CacheEntry(
            body=data,
            modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
        )

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        try:
            _atomic_write(path, data)
        except OSError as exc:
            raise CacheStorageError(f"write cache entry {path}: {exc}") from exc


def _atomic_write(path: Path, data: bytes) -> None:
    """Write *data* to *path* using a same-directory temp file and rename.

    On any failure the temp file is removed and the exception re-raised.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.chmod(tmp_path, _FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
