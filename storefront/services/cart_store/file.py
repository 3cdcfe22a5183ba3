"""
File Key-Value Store with Concurrency Control

Keeps every key in a single JSON document on disk. Reads and writes take a
``filelock.FileLock`` next to the document so two storefront processes on
the same machine never interleave a read-modify-write.

Values are stored as latin-1 text so arbitrary bytes round-trip through JSON.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from storefront.services.cart_store.base import BaseKeyValueStore, CartStoreError

logger = logging.getLogger(__name__)


class FileKeyValueStore(BaseKeyValueStore):
    """
    JSON-file-backed store.

    Attributes:
        path: Location of the JSON document
        lock_timeout: Seconds to wait for the file lock
    """

    def __init__(self, path: str, lock_timeout: int = 10):
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self._lock = FileLock(str(self.path) + ".lock", timeout=lock_timeout)

    @property
    def provider_name(self) -> str:
        return "file"

    def _ensure_dir(self) -> None:
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created cart store directory: {self.path.parent}")

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"Cart store {self.path} is corrupt; starting empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[bytes]:
        try:
            self._ensure_dir()
            with self._lock:
                value = self._read().get(key)
        except (OSError, Timeout) as e:
            raise CartStoreError(f"Could not read {self.path}: {e}") from e
        if not isinstance(value, str):
            return None
        try:
            return value.encode("latin-1")
        except UnicodeEncodeError:
            logger.warning(f"Cart store {self.path} holds an unreadable value for {key!r}")
            return None

    def set(self, key: str, value: bytes) -> None:
        try:
            self._ensure_dir()
            with self._lock:
                data = self._read()
                data[key] = value.decode("latin-1")
                self._write(data)
        except (OSError, Timeout) as e:
            raise CartStoreError(f"Could not write {self.path}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self._ensure_dir()
            with self._lock:
                data = self._read()
                if key in data:
                    del data[key]
                    self._write(data)
        except (OSError, Timeout) as e:
            raise CartStoreError(f"Could not write {self.path}: {e}") from e
