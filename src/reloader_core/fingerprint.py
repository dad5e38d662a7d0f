"""Content fingerprints used to tell real edits from metadata-only touches."""

import hashlib
import logging
import os
import stat
from pathlib import Path

logger = logging.getLogger(__name__)


def file_digest(path: str | Path) -> str:
    """Return the md5 hex digest of a file's current bytes.

    Only regular files are read; opening a FIFO would block until a
    writer shows up.

    Raises:
        OSError: If the file cannot be read or is not a regular file
    """
    if not stat.S_ISREG(os.stat(path).st_mode):
        raise OSError(f"not a regular file: {path}")
    with open(path, "rb") as f:
        return hashlib.md5(f.read()).hexdigest()


class FingerprintStore:
    """Maps absolute paths to the digest of their last observed content.

    Entries are replaced on change and never removed. Owned by a single
    event loop, so there is no locking.
    """

    def __init__(self):
        self._digests: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._digests)

    def __contains__(self, path: object) -> bool:
        return path in self._digests

    def get(self, path: str) -> str | None:
        """Last stored digest for path, or None if never seen."""
        return self._digests.get(path)

    def observe(self, path: str) -> bool:
        """Read path and report whether its content differs from last time.

        A path seen for the first time counts as changed. An unreadable file
        (deleted, mid-write, permission denied) counts as unchanged and
        leaves the store untouched.

        Args:
            path: Absolute file path

        Returns:
            True if the content is new or different
        """
        try:
            digest = file_digest(path)
        except OSError as e:
            logger.error(f"Cannot fingerprint {path}: {e}")
            return False

        if self._digests.get(path) == digest:
            return False

        self._digests[path] = digest
        return True
