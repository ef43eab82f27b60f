"""Local disk storage for uploaded content."""

import logging
import os
import tempfile
from uuid import uuid4

logger = logging.getLogger(__name__)

# mode open() gives new files, mkstemp would otherwise leave 0600
_UMASK = os.umask(0)
os.umask(_UMASK)
FILE_MODE = 0o666 & ~_UMASK


class LocalStorage:
    """Writes payloads under a root folder using random file names."""

    def __init__(self, root: str) -> None:
        self.root = root

    def save(self, data: bytes) -> str:
        """Store data under a fresh random name.

        Returns:
            Absolute path of the written file.
        """
        os.makedirs(self.root, exist_ok=True)
        local_path = os.path.join(os.path.abspath(self.root), str(uuid4()))
        try:
            with open(local_path, "wb") as f:
                f.write(data)
        except OSError:
            logger.exception("Failed to write file to storage: %s", local_path)
            raise
        logger.info("Stored %d bytes at %s", len(data), local_path)
        return local_path

    def exists(self, local_path: str | None) -> bool:
        return bool(local_path) and os.path.isfile(local_path)

    def read(self, local_path: str) -> bytes:
        with open(local_path, "rb") as f:
            return f.read()

    def rollback_save(self, local_path: str) -> None:
        """Best effort removal of a file whose metadata write failed."""
        try:
            logger.warning("Rolling back upload, deleting file: %s", local_path)
            os.remove(local_path)
        except OSError:
            logger.exception("Failed to rollback upload, orphaned file: %s", local_path)


def write_atomic(path: str, data: bytes) -> None:
    """Write data to path through a temp file in the same folder.

    Readers never see a partially written file and a second write replaces
    the first.
    """
    folder = os.path.dirname(path) or "."
    fd, tmp_path = tempfile.mkstemp(dir=folder, prefix=".tmp_")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
