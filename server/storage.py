"""
Local file storage for uploaded PDFs.
"""

import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an upload cannot be written to disk."""


class LocalFileStorage:
    """
    Stores uploads under a single directory.

    Files are written to a temporary name and renamed into place, so a
    write that does not finish never shows up under its final name.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def make_name(original_name: str, timestamp_ms: Optional[int] = None) -> str:
        """Collision-resistant stored name: ``<epoch millis>-<random hex>-<base name>``."""
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        # Client-supplied names are untrusted; keep only the final component
        base = Path(original_name.replace("\\", "/")).name or "upload.pdf"
        return f"{timestamp_ms}-{secrets.token_hex(4)}-{base}"

    def _write(self, path: Path, data: bytes) -> None:
        tmp_path = path.with_name(f".{path.name}.part")
        try:
            with open(tmp_path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    async def save(self, original_name: str, data: bytes) -> Path:
        """
        Write an upload to disk.

        Returns:
            Path of the stored file

        Raises:
            StorageError: the file could not be written
        """
        self.ensure_root()
        path = self.root / self.make_name(original_name)

        try:
            await run_in_threadpool(self._write, path, data)
        except OSError as e:
            raise StorageError(f"Could not store {path.name}: {e}") from e

        logger.info(f"[Storage] Saved {path.name} ({len(data)} bytes)")
        return path

    async def delete(self, path: Path) -> None:
        """Remove a stored file if it exists."""
        await run_in_threadpool(Path(path).unlink, missing_ok=True)
        logger.info(f"[Storage] Removed {Path(path).name}")
