"""
Durable string key-value storage backed by one JSON file per key.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from openklaw.core.config import settings
from openklaw.core.logging import get_logger

logger = get_logger(__name__)


class JsonFileStorage:
    """
    Stores serialized values under ``{data_dir}/{key}.json``.

    Errors from the filesystem propagate; callers decide whether
    persistence is best-effort.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the storage.

        Args:
            data_dir: Directory for stored files (defaults to settings.storage.data_dir)
        """
        self.data_dir = Path(data_dir or settings.storage.data_dir).expanduser()

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Stored text for ``key``, or None if nothing is stored."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """Write ``value`` for ``key``, replacing the file atomically."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Stored item", key=key, size=len(value))

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
