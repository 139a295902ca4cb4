"""
Key/value store backed by JSON files on disk.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path

from ..domain.exceptions import StorageError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore:
    """
    Stores each key as ``<key>.json`` inside a directory.

    Writes go to a temporary file that is then moved over the target, so a
    crash mid-write leaves either the old or the new value, never a torn one.
    File I/O runs in a worker thread to keep the async callers responsive.
    """

    def __init__(self, directory: Path):
        """
        Initialize the store.

        Args:
            directory: Folder holding the record files (created on first write)
        """
        self.directory = Path(directory).expanduser()

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    def path_for(self, key: str) -> Path:
        """File path used for a key."""
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as file_handle:
                return file_handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def _write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_name = None

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.directory, prefix=f".{key}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as file_handle:
                file_handle.write(value)
                file_handle.flush()
                os.fsync(file_handle.fileno())
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Could not write {path}: {exc}") from exc

        logger.debug("Wrote %d bytes to %s", len(value), path)

    def _remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove {path}: {exc}") from exc
