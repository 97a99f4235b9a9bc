"""
Cache management for parsed export data.

The cache holds one encrypted snapshot of the export file. It is rebuilt
whenever the export file's fingerprint no longer matches the one recorded in
the snapshot, and discarded whenever it cannot be decrypted or parsed. The
export file is always the source of truth.
"""

import os
import json
import logging
import threading
from enum import Enum
from typing import List, Optional

from .crypto import CryptoManager
from .errors import DecryptionError, SourceNotConfigured, SourceNotFound
from .importer import ExportImporter, file_fingerprint
from .models import Credential, PaymentCard, SecureNote, Snapshot
from .secure_file import read_secure, write_secure
from .utils import set_secure_file_permissions

logger = logging.getLogger(__name__)


class CacheState(Enum):
    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"
    CORRUPT = "corrupt"
    # Served without a fingerprint check because the export file is missing
    UNVERIFIED = "unverified"


class CacheManager:
    """
    Owns the encrypted cache file for one export file.

    Every public operation runs under an instance lock. Separate processes
    sharing a cache path are not coordinated.
    """

    def __init__(self, cache_path: str, source_path: Optional[str],
                 crypto: Optional[CryptoManager] = None,
                 importer: Optional[ExportImporter] = None):
        """
        Initialize cache manager.
        Args:
            cache_path: Path to the encrypted cache file
            source_path: Path to the export file, or None if none was resolved
            crypto: Codec for the cache file (defaults to this machine's key)
            importer: Parser for the export file
        """
        self.cache_path = cache_path
        self.source_path = source_path
        self.crypto = crypto or CryptoManager()
        self.importer = importer or ExportImporter()
        self._lock = threading.Lock()
        # State the cache file was found in by the last get(), before any rebuild
        self.state: Optional[CacheState] = None
        self.rebuild_count = 0

    def get(self, force_refresh: bool = False) -> Snapshot:
        """
        Get the current snapshot, rebuilding it if needed.

        Args:
            force_refresh: Rebuild even if the cached snapshot is fresh

        Raises:
            SourceNotConfigured: If no export file path is set
            SourceNotFound: If a rebuild is needed and the export file is missing
            SourceFormatError: If the export file cannot be read, or cannot be parsed during a rebuild
        """
        with self._lock:
            source_path = self._require_source()
            if force_refresh:
                return self._rebuild(source_path)

            cached = self._load()
            if cached is None:
                return self._rebuild(source_path)

            if not os.path.exists(source_path):
                # Export file moved away; serve what we have
                logger.warning(f"Export file {source_path} is missing, serving cached data")
                self.state = CacheState.UNVERIFIED
                return cached

            if cached.source_fingerprint != file_fingerprint(source_path):
                logger.info("Export file changed since the cache was built")
                self.state = CacheState.STALE
                return self._rebuild(source_path)

            logger.debug("Cache is fresh")
            self.state = CacheState.FRESH
            return cached

    def refresh(self) -> Snapshot:
        """Rebuild the cache from the export file unconditionally."""
        return self.get(force_refresh=True)

    def clear(self) -> None:
        """Delete the cache file. Never raises."""
        with self._lock:
            try:
                os.remove(self.cache_path)
                logger.info(f"Cleared cache {self.cache_path}")
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error(f"Error clearing cache {self.cache_path}: {e}")
            self.state = CacheState.EMPTY

    def get_credentials(self) -> List[Credential]:
        """Get all credentials from the current snapshot."""
        return list(self.get().credentials)

    def get_cards(self) -> List[PaymentCard]:
        """Get all payment cards from the current snapshot."""
        return list(self.get().cards)

    def get_notes(self) -> List[SecureNote]:
        """Get all secure notes from the current snapshot."""
        return list(self.get().notes)

    def _require_source(self) -> str:
        if not self.source_path:
            raise SourceNotConfigured()
        return self.source_path

    def _load(self) -> Optional[Snapshot]:
        """
        Load the cached snapshot. An unreadable cache file is deleted and
        reported as no cache.
        """
        if not os.path.exists(self.cache_path):
            self.state = CacheState.EMPTY
            return None

        try:
            plaintext = read_secure(self.cache_path, crypto=self.crypto)
            return Snapshot.from_dict(json.loads(plaintext))
        except (DecryptionError, ValueError, OSError, RecursionError) as e:
            logger.warning(f"Discarding unreadable cache {self.cache_path}: {e}", exc_info=True)
            self.state = CacheState.CORRUPT
            self._discard()
            return None

    def _discard(self) -> None:
        try:
            os.remove(self.cache_path)
        except OSError as e:
            logger.error(f"Could not delete unreadable cache {self.cache_path}: {e}")

    def _rebuild(self, source_path: str) -> Snapshot:
        """Parse the export file and persist a new snapshot."""
        if not os.path.exists(source_path):
            raise SourceNotFound(source_path)

        logger.info(f"Rebuilding cache from {source_path}")
        # Fingerprint first: a concurrent edit then shows up as stale next time
        fingerprint = file_fingerprint(source_path)
        parsed = self.importer.parse_source(source_path)

        if not set_secure_file_permissions(source_path):
            logger.warning(f"Could not restrict permissions on export file {source_path}")

        snapshot = Snapshot(
            credentials=tuple(parsed.credentials),
            cards=tuple(parsed.cards),
            notes=tuple(parsed.notes),
            source_fingerprint=fingerprint,
        )
        self._save(snapshot)
        self.rebuild_count += 1
        return snapshot

    def _save(self, snapshot: Snapshot) -> None:
        cache_dir = os.path.dirname(self.cache_path)
        if cache_dir:
            os.makedirs(cache_dir, exist_ok=True)
        plaintext = json.dumps(snapshot.to_dict(), indent=2)
        write_secure(self.cache_path, plaintext, encrypt=True, crypto=self.crypto)
