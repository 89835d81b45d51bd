"""Data Access Object (DAO) implementation for managing shortened URLs in process memory

This module provides a thread-safe, in-memory implementation of ShortURLBaseDAO.
It is the default backend: one instance is constructed per process and shared by
reference between all callers.

Responsibilities:
    - Insert short URLs with an atomic insert-if-absent on the key space;
    - Record clicks atomically per record (expiry check + append + increment);
    - Hand out immutable ShortURLModel snapshots, never the mutable state.

Locking:
    - `_lock` (table-wide) guards the key space only. It is held for the
      "check shortcode unused" + "insert" pair and for dictionary reads.
    - `_Entry.lock` (per record) guards the click log and counter. Clicks on
      unrelated shortcodes never contend with each other.
    - Locks are never nested table -> record while doing anything but O(1) work,
      and no I/O happens while holding either of them.

Classes:
    ShortURLMemoryDAO:
        DAO for storing and retrieving ShortURLModel in a Python dictionary.

Example:
    >>> from datetime import datetime, UTC
    >>> from linkshortener.models import ShortURLModel
    >>> from linkshortener.dao.memory import ShortURLMemoryDAO

    >>> dao = ShortURLMemoryDAO()
    >>> dao.insert(ShortURLModel(target="https://example.com/page", shortcode="abc123", created_at=datetime.now(UTC)))
    <ShortURLMemoryDAO>
    >>> dao.get("abc123").target
    'https://example.com/page'
"""

import threading

from beartype import beartype

from linkshortener.models import ShortURLModel, ClickEventModel
from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError, ShortURLExpiredError


class _Entry:
    """Mutable per-record state, owned exclusively by ShortURLMemoryDAO."""

    __slots__ = ('target', 'shortcode', 'created_at', 'validity_minutes', 'expires_at', 'click_count', 'clicks', 'lock')

    def __init__(self, short_url: ShortURLModel):
        self.target = short_url.target
        self.shortcode = short_url.shortcode
        self.created_at = short_url.created_at
        self.validity_minutes = short_url.validity_minutes
        self.expires_at = short_url.expires_at
        self.click_count = short_url.click_count
        self.clicks = list(short_url.clicks)
        self.lock = threading.Lock()

    def snapshot(self) -> ShortURLModel:
        # NOTE: caller must hold self.lock
        return ShortURLModel(
            target=self.target,
            shortcode=self.shortcode,
            created_at=self.created_at,
            validity_minutes=self.validity_minutes,
            click_count=self.click_count,
            clicks=tuple(self.clicks),
        )


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """In-memory Data Access Object (DAO) for managing short URL mappings

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLMemoryDAO:
            Insert a short URL mapping if its shortcode is unused.
            Raises ShortURLAlreadyExistsError when a URL with the same shortcode exists.

        get(shortcode: str, **kwargs) -> ShortURLModel | None:
            Retrieve a snapshot of a short URL mapping by shortcode.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether the shortcode is taken.

        hit(shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
            Atomically check expiry, append the click event and increment the counter.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises ShortURLExpiredError when the mapping expired before the click.

        all(**kwargs) -> list[ShortURLModel]:
            Snapshot all mappings ordered by creation time.

        close() -> None:
            Inherited no-op. Mappings live as long as the DAO instance does.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def __repr__(self) -> str:
        return '<ShortURLMemoryDAO>'

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMemoryDAO':
        """Insert a short URL mapping

        The existence check and the insertion share a single critical section,
        so two concurrent inserts of the same shortcode can't both succeed.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLMemoryDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
        """
        entry = _Entry(short_url)
        with self._lock:
            if short_url.shortcode in self._entries:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
            self._entries[short_url.shortcode] = entry
        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        with self._lock:
            entry = self._entries.get(shortcode)
        if entry is None:
            return None
        with entry.lock:
            return entry.snapshot()

    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        with self._lock:
            return shortcode in self._entries

    @beartype
    def hit(self, shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
        """Record a click on a short URL

        Example:
            >>> dao.hit('abc123', ClickEventModel(timestamp=now, source='curl/8.5', location='DE'))
            ShortURLModel(target='https://example.com', shortcode='abc123', click_count=1, ...)
        """
        with self._lock:
            entry = self._entries.get(shortcode)
        if entry is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        with entry.lock:
            # Inclusive boundary: a click exactly at expires_at is still valid
            if click.timestamp > entry.expires_at:
                raise ShortURLExpiredError(f"Short URL with code '{shortcode}' has expired.")
            entry.clicks.append(click)
            entry.click_count += 1
            return entry.snapshot()

    def all(self, **kwargs) -> list[ShortURLModel]:
        with self._lock:
            entries = list(self._entries.values())

        snapshots = []
        for entry in entries:
            with entry.lock:
                snapshots.append(entry.snapshot())
        # NOTE: sorted() is stable, records created at the same instant keep insertion order
        return sorted(snapshots, key=lambda short_url: short_url.created_at)
