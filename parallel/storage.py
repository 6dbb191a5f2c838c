"""
Board persistence gateway.

Loads and saves the single board document. The remote file store is tried
first; a local JSON cache is always written and serves as the fallback when
the remote is unreachable or empty. Persistence errors never reach callers.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .errors import RemoteStoreError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "parallel-board"


class LocalCache:
    """A single keyed slot holding the last-known board as JSON text."""

    def __init__(self, directory: str, key: str = DEFAULT_CACHE_KEY):
        self.directory = Path(directory).expanduser()
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def read(self) -> Optional[Dict[str, Any]]:
        """Return the cached document, or None if absent or unreadable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Local cache read failed ({self.path}): {e}")
            return None
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Local cache is corrupt ({self.path}): {e}")
            return None

    def write(self, doc: Dict[str, Any]) -> bool:
        """Best-effort atomic write. Returns False on failure, never raises."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_file = self.path.with_suffix(".json.tmp")
            tmp_file.write_text(json.dumps(doc), encoding="utf-8")
            os.replace(tmp_file, self.path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save board to local cache: {e}")
            return False


class RemoteBoardClient:
    """HTTP client for the single-document board endpoint."""

    def __init__(self, url: str, timeout: Optional[float] = 5):
        self.url = url
        self.timeout = timeout

    def fetch(self) -> Optional[Dict[str, Any]]:
        """GET the board. Returns None when the store has no document yet."""
        try:
            r = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteStoreError(f"GET {self.url} failed: {e}") from e
        if not r.ok:
            raise RemoteStoreError(f"GET {self.url} returned {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise RemoteStoreError(f"GET {self.url} returned invalid JSON") from e

    def store(self, doc: Dict[str, Any]) -> None:
        """PUT the whole board, replacing the stored document."""
        try:
            r = requests.put(self.url, json=doc, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteStoreError(f"PUT {self.url} failed: {e}") from e
        if not r.ok:
            raise RemoteStoreError(f"PUT {self.url} returned {r.status_code}")


class BoardGateway:
    """Remote-first board persistence with a local cache backstop."""

    def __init__(self, cache: LocalCache, remote: Optional[RemoteBoardClient] = None):
        self.cache = cache
        self.remote = remote
        self._remote_available = False

    @property
    def remote_available(self) -> bool:
        return self._remote_available

    def load_board(self) -> Optional[Dict[str, Any]]:
        """Load the board document, or None when no source has one."""
        if self.remote is not None:
            try:
                doc = self.remote.fetch()
                self._remote_available = True
                if doc is not None:
                    return doc
                logger.info("Remote store is empty, reading local cache")
            except RemoteStoreError as e:
                self._remote_available = False
                logger.warning(f"Remote store unavailable, using local cache: {e}")
        return self.cache.read()

    def save_board(self, doc: Dict[str, Any]) -> None:
        """Write to the local cache, then to the remote if it was reachable."""
        self.cache.write(doc)
        if not self._remote_available:
            return
        try:
            self.remote.store(doc)
        except RemoteStoreError as e:
            # The cache already holds this state; the next save retries.
            logger.warning(f"Remote save failed: {e}")
