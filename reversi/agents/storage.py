"""Binary persistence for the evolving agent's evaluation table.

File format::

    [header: 33 magic bytes][version: 4 bytes][table: 156 800 bytes]

A missing file is created with a fresh table. A directory at the path, a
foreign header, an unknown version or a truncated payload is renamed to
``<path>.<n>.unsupported-file-backup`` and replaced by a fresh table, so a
damaged file never blocks startup. Saves go through a temporary file that
is renamed over the target, so readers never see a partial table.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)

# Storage constants
FILE_HEADER = b"\xffReminimalism.Reversi.EvolvingAI\xff"
FILE_VERSION = b"\x00\x00\x00\x00"
DEFAULT_VALUE = 128

UNSUPPORTED_BACKUP_SUFFIX = "unsupported-file-backup"
BACKUP_SUFFIX = "backup"


def fresh_table(size: int) -> np.ndarray:
    """Return a table of ``size`` neutral entries."""
    return np.full(size, DEFAULT_VALUE, dtype=np.uint8)


class TableStore:
    """Load, validate, back up and save one evaluation table file."""

    def __init__(self, path: Path | str, size: int) -> None:
        """Initialize the store.

        Args:
            path: Path of the table file
            size: Number of table entries (one byte each)
        """
        self.path = Path(path)
        self.size = size

    @property
    def file_size(self) -> int:
        return len(FILE_HEADER) + len(FILE_VERSION) + self.size

    def load(self) -> np.ndarray:
        """Return the stored table, self-healing missing or unsupported files."""
        if not self.path.exists():
            logger.info("Creating new evaluation table at %s", self.path)
            return self._reset()

        if self.path.is_dir() or not self._is_supported():
            backup = self._rename_to_backup(unsupported=True)
            logger.warning("Unsupported evaluation table %s moved to %s", self.path, backup)
            return self._reset()

        with open(self.path, "rb") as f:
            f.seek(len(FILE_HEADER) + len(FILE_VERSION))
            data = f.read(self.size)
        logger.info("Loaded evaluation table from %s", self.path)
        return np.frombuffer(data, dtype=np.uint8).copy()

    def save(self, table: np.ndarray) -> None:
        """Write header, version and table atomically."""
        if table.shape != (self.size,) or table.dtype != np.uint8:
            raise ValueError(f"Expected a uint8 table of {self.size} entries, got {table.dtype} {table.shape}")

        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(FILE_HEADER)
                f.write(FILE_VERSION)
                f.write(table.tobytes())
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_name, self.path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved evaluation table to %s", self.path)

    def reset(self, *, backup: bool = True) -> np.ndarray:
        """Administrative reset: optionally keep the old file as ``<path>.<n>.backup``."""
        if backup and self.path.exists():
            target = self._rename_to_backup(unsupported=False)
            logger.info("Backed up evaluation table %s to %s", self.path, target)
        return self._reset()

    def backup_path(self, index: int, *, unsupported: bool) -> Path:
        suffix = UNSUPPORTED_BACKUP_SUFFIX if unsupported else BACKUP_SUFFIX
        return self.path.with_name(f"{self.path.name}.{index}.{suffix}")

    def _is_supported(self) -> bool:
        if self.path.stat().st_size != self.file_size:
            return False
        with open(self.path, "rb") as f:
            header = f.read(len(FILE_HEADER))
            version = f.read(len(FILE_VERSION))
        return header == FILE_HEADER and version == FILE_VERSION

    def _rename_to_backup(self, *, unsupported: bool) -> Path:
        index = 0
        while self.backup_path(index, unsupported=unsupported).exists():
            index += 1
        target = self.backup_path(index, unsupported=unsupported)
        self.path.rename(target)
        return target

    def _reset(self) -> np.ndarray:
        table = fresh_table(self.size)
        self.save(table)
        return table


__all__ = [
    "BACKUP_SUFFIX",
    "DEFAULT_VALUE",
    "FILE_HEADER",
    "FILE_VERSION",
    "TableStore",
    "UNSUPPORTED_BACKUP_SUFFIX",
    "fresh_table",
]
