"""Key-value cache stored as documents in the backing database."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A stored cache document."""

    id: str
    key: str
    value: object
    expires_at: datetime | None


class CacheRepository(Protocol):
    """Persistence interface for cache documents."""

    def find(self, key: str) -> CacheEntry | None:
        """Return the entry stored under a key, if present."""

    def insert(
        self, key: str, value: object, expires_at: datetime | None, now: datetime
    ) -> None:
        """Create a new entry."""

    def update(
        self, entry_id: str, value: object, expires_at: datetime | None, now: datetime
    ) -> None:
        """Replace the value and expiry of an existing entry."""

    def delete(self, entry_id: str) -> None:
        """Delete an entry by id."""

    def delete_key(self, key: str) -> None:
        """Delete every entry stored under a key."""

    def delete_expired(self, now: datetime) -> int:
        """Delete entries that expired before now and return the count."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DocumentCache:
    """Naive cache over a document collection; no eviction beyond expiry."""

    repository: CacheRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def get(self, key: str) -> object | None:
        """Return a cached value, deleting it if it has expired."""
        try:
            entry = self.repository.find(key)
            if entry is None:
                return None
            if entry.expires_at is not None and entry.expires_at < self.clock():
                self.repository.delete(entry.id)
                return None
            return entry.value
        except Exception:
            _logger.exception("Cache read failed: key=%s", key)
            return None

    def set(self, key: str, value: object, ttl_seconds: int = 0) -> None:
        """Store a value; a non-positive TTL never expires."""
        now = self.clock()
        expires_at = now + timedelta(seconds=ttl_seconds) if ttl_seconds > 0 else None
        try:
            existing = self.repository.find(key)
            if existing is not None:
                self.repository.update(existing.id, value, expires_at, now)
            else:
                self.repository.insert(key, value, expires_at, now)
        except Exception:
            _logger.exception("Cache write failed: key=%s", key)
            raise

    def remove(self, key: str) -> None:
        """Delete a key."""
        try:
            self.repository.delete_key(key)
        except Exception:
            _logger.exception("Cache delete failed: key=%s", key)

    def clear_expired(self) -> int:
        """Delete all expired entries and return how many were removed."""
        try:
            return self.repository.delete_expired(self.clock())
        except Exception:
            _logger.exception("Cache cleanup failed")
            return 0
