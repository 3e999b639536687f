"""Byte-blob storage keyed by a logical file name.

Every store reads its whole blob on load and rewrites it on save.  The
on-disk implementation keeps all blobs in one app-private directory:
``click.get_app_dir("pnch")`` unless another root is given.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

import click

from pnch.errors import StorageError

logger = logging.getLogger(__name__)

APP_NAME = "pnch"


class BlobStorage(Protocol):
    """Load/save primitive consumed by the stores."""

    def load(self, name: str) -> bytes:
        """Return the blob called ``name``, or ``b""`` if it does not exist."""
        ...

    def save(self, name: str, data: bytes) -> None:
        """Replace the blob called ``name`` with ``data``."""
        ...


class DirectoryStorage:
    """Blobs stored as files in a single directory.

    Parameters
    ----------
    root:
        Directory holding the files.  Created on first save.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    @classmethod
    def default(cls) -> "DirectoryStorage":
        """Return storage rooted at the per-user application directory."""
        return cls(click.get_app_dir(APP_NAME))

    def path_for(self, name: str) -> Path:
        return self.root / name

    def load(self, name: str) -> bytes:
        path = self.path_for(name)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.debug("%s does not exist yet", path)
            return b""
        except OSError as exc:
            raise StorageError("load", name) from exc
        logger.debug("Read %d byte(s) from %s", len(data), path)
        return data

    def save(self, name: str, data: bytes) -> None:
        """Write ``data`` to a temporary file and rename it over ``name``."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("create the directory of", name) from exc
        path = self.path_for(name)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError("save", name) from exc
        logger.debug("Wrote %d byte(s) to %s", len(data), path)


class MemoryStorage:
    """Blobs kept in a dict; used by tests and dry runs."""

    def __init__(self, blobs: dict[str, bytes] | None = None) -> None:
        self.blobs: dict[str, bytes] = dict(blobs) if blobs else {}

    def load(self, name: str) -> bytes:
        return self.blobs.get(name, b"")

    def save(self, name: str, data: bytes) -> None:
        self.blobs[name] = bytes(data)
