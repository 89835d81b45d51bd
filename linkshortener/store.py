"""Mapping store: the single source of truth for shortcode -> URL mappings

MappingStore validates shorten requests, assigns shortcodes, enforces the
validity window on resolution and accounts clicks. Atomicity is delegated to
the DAO primitives (insert-if-absent, per-record hit); the store only adds
validation up front and access log emission after the fact.

Construct one store per process and pass it by reference to every caller.
Close it (or use it as a context manager) to release the backend.

Example:
    >>> from linkshortener.store import MappingStore
    >>> with MappingStore() as store:
    ...     short_url = store.create('https://example.com/page', 30, 'abc123')
    ...     store.resolve('abc123', source='curl/8.5', location='DE').click_count
    1
"""

import logging
from collections.abc import Callable
from datetime import datetime, UTC
from typing import Any

from linkshortener.constants import Defaults, EventType
from linkshortener.types import AppConfig
from linkshortener.models import ShortURLModel, ClickEventModel
from linkshortener.access_log import AccessLogBase, MemoryAccessLog, LoggerAccessLog
from linkshortener.dao import ShortURLBaseDAO, ShortURLMemoryDAO
from linkshortener.dao.exceptions import (
    ValidationError,
    ShortURLAlreadyExistsError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
    ShortcodeGenerationError,
)
from linkshortener.exceptions import BadConfigurationError
from linkshortener.utils.shortener import ShortcodeGenerator
from linkshortener.utils.validators import validate_target_url, validate_shortcode, validate_validity_minutes


logger = logging.getLogger(__name__)

# Inserts of freshly generated codes which may lose a race before giving up
GENERATED_INSERT_ATTEMPTS = 3


class MappingStore:
    """Create, resolve and list short URL mappings

    Attributes:
        dao (ShortURLBaseDAO):
            Storage backend. Defaults to a new ShortURLMemoryDAO.
        generator (ShortcodeGenerator):
            Shortcode generator for requests without a custom shortcode.
        access_log (AccessLogBase):
            Best-effort sink for CREATE/CLICK/ERROR events.
        clock (Callable[[], datetime]):
            Source of the current time. Defaults to timezone-aware UTC now.
        default_validity_minutes (int):
            Validity window used when a request omits it. Defaults to 30.
        max_batch_size (int):
            Links accepted by a single batch shorten request. Defaults to 5.

    Methods:
        create(target, validity_minutes=None, shortcode=None) -> ShortURLModel
        resolve(shortcode, source=None, location=None) -> ShortURLModel
        get(shortcode) -> ShortURLModel | None
        list() -> list[ShortURLModel]
        close() -> None
    """

    def __init__(
        self,
        dao: ShortURLBaseDAO | None = None,
        generator: ShortcodeGenerator | None = None,
        access_log: AccessLogBase | None = None,
        clock: Callable[[], datetime] | None = None,
        default_validity_minutes: int = Defaults.VALIDITY_MINUTES,
        max_batch_size: int = Defaults.MAX_BATCH_SIZE,
    ):
        self.dao = dao if dao is not None else ShortURLMemoryDAO()
        self.generator = generator or ShortcodeGenerator()
        self.access_log = access_log if access_log is not None else LoggerAccessLog()
        self.clock = clock or (lambda: datetime.now(UTC))
        self.default_validity_minutes = validate_validity_minutes(default_validity_minutes)
        if not isinstance(max_batch_size, int) or isinstance(max_batch_size, bool) or max_batch_size <= 0:
            raise ValueError(f'Max batch size must be a positive integer (given value: {max_batch_size!r}).')
        self.max_batch_size = max_batch_size

    @classmethod
    def from_config(cls, config: AppConfig, prefix: str | None = None) -> 'MappingStore':
        """Build a store from a configuration document (see utils.config.load_config)

        Args:
            config (dict):
                Configuration document with `active_backend`, `backends`,
                `shortcode`, `links` and `access_log` sections.
            prefix (str | None):
                Key namespace for shared backends, e.g. 'linkshortener:dev'.

        Returns:
            MappingStore: new store

        Raises:
            BadConfigurationError:
                If the active backend or access log sink is unknown.
            DataStoreError:
                If the Redis backend is unreachable.
        """
        backend = config.get('active_backend', 'memory')
        backend_config = config.get('backends', {}).get(backend) or {}
        if backend == 'memory':
            dao = ShortURLMemoryDAO()
        elif backend == 'redis':
            # Imported lazily so the memory backend doesn't need a Redis client
            from linkshortener.dao.redis import ShortURLRedisDAO

            redis_config = {f'redis_{k}': v for k, v in backend_config.items()}
            dao = ShortURLRedisDAO(**redis_config, prefix=prefix)
        else:
            raise BadConfigurationError(f"Unknown backend '{backend}' (expected 'memory' or 'redis').")

        access_log_config = config.get('access_log') or {}
        sink = access_log_config.get('sink', 'logger')
        if sink not in ('logger', 'memory'):
            raise BadConfigurationError(f"Unknown access log sink '{sink}' (expected 'logger' or 'memory').")

        shortcode_config = config.get('shortcode') or {}
        links_config = config.get('links') or {}
        try:
            if sink == 'memory':
                access_log = MemoryAccessLog(max_entries=access_log_config.get('max_entries'))
            else:
                access_log = LoggerAccessLog()
            generator = ShortcodeGenerator(**shortcode_config)
            return cls(
                dao=dao,
                generator=generator,
                access_log=access_log,
                default_validity_minutes=links_config.get('default_validity_minutes', Defaults.VALIDITY_MINUTES),
                max_batch_size=links_config.get('max_batch_size', Defaults.MAX_BATCH_SIZE),
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise BadConfigurationError(f'Invalid access_log, shortcode or links configuration: {e}') from e

    def __enter__(self) -> 'MappingStore':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def create(self, target: Any, validity_minutes: Any = None, shortcode: Any = None) -> ShortURLModel:
        """Create a new short URL mapping

        Args:
            target (str):
                Destination URL, must be absolute (scheme + host).
            validity_minutes (int | str | None):
                Positive validity period in minutes. Defaults to the store default.
            shortcode (str | None):
                Custom shortcode matching [A-Za-z0-9_-]{4,12}. Generated when None.

        Returns:
            ShortURLModel: the new mapping (click_count=0, no clicks).

        Raises:
            InvalidURLError: target isn't an absolute URL.
            InvalidValidityError: validity period isn't a positive integer.
            InvalidShortcodeError: custom shortcode has an invalid format.
            ShortURLAlreadyExistsError: custom shortcode is taken (live or expired).
            ShortcodeGenerationError: generated shortcodes kept losing insert races.
            DataStoreError: backend connectivity issues.
        """
        try:
            target = validate_target_url(target)
            validity_minutes = validate_validity_minutes(validity_minutes, default=self.default_validity_minutes)
            if shortcode is not None:
                shortcode = validate_shortcode(shortcode)
        except ValidationError as e:
            logger.info('Rejected shorten request.', extra={'reason': str(e), 'errorCode': e.error_code})
            self._emit(EventType.ERROR, e.error_code.lower(), {'target': str(target), 'shortcode': shortcode})
            raise

        if shortcode is not None:
            short_url = ShortURLModel(
                target=target,
                shortcode=shortcode,
                created_at=self.clock(),
                validity_minutes=validity_minutes,
            )
            try:
                self.dao.insert(short_url)
            except ShortURLAlreadyExistsError as e:
                logger.info('Rejected shorten request: shortcode taken.', extra={'shortcode': shortcode})
                self._emit(EventType.ERROR, e.error_code.lower(), {'target': target, 'shortcode': shortcode})
                raise
        else:
            short_url = self._insert_generated(target, validity_minutes)

        logger.info('Created short URL.', extra={'shortcode': short_url.shortcode, 'validityMinutes': validity_minutes})
        self._emit(
            EventType.CREATE,
            'mapping',
            {'shortcode': short_url.shortcode, 'target': target, 'validityMinutes': validity_minutes},
        )
        return short_url

    def resolve(self, shortcode: str, source: str | None = None, location: str | None = None) -> ShortURLModel:
        """Resolve a shortcode and account the click

        Args:
            shortcode (str): shortcode to resolve
            source (str | None): request source descriptor, e.g. the User-Agent
            location (str | None): coarse location of the request

        Returns:
            ShortURLModel: updated snapshot; `target` is the redirect destination.

        Raises:
            ShortURLNotFoundError: no mapping with this shortcode.
            ShortURLExpiredError: mapping exists but its validity window has passed.
            DataStoreError: backend connectivity issues.
        """
        click = ClickEventModel(
            timestamp=self.clock(),
            source=source or Defaults.CLICK_SOURCE,
            location=location or Defaults.CLICK_LOCATION,
        )

        try:
            short_url = self.dao.hit(shortcode, click)
        except (ShortURLNotFoundError, ShortURLExpiredError) as e:
            logger.info('Short URL could not be resolved.', extra={'shortcode': shortcode, 'errorCode': e.error_code})
            self._emit(EventType.ERROR, e.error_code.lower(), {'shortcode': shortcode})
            raise

        logger.debug('Resolved short URL.', extra={'shortcode': shortcode, 'clickCount': short_url.click_count})
        self._emit(
            EventType.CLICK,
            'increment',
            {'shortcode': shortcode, 'clickCount': short_url.click_count, 'source': click.source, 'location': click.location},
        )
        return short_url

    def get(self, shortcode: str) -> ShortURLModel | None:
        return self.dao.get(shortcode)

    def list(self) -> list[ShortURLModel]:
        return self.dao.all()

    def close(self) -> None:
        """Release the backend connection and flush the access log

        Data is not deleted: a memory backend keeps its mappings until the
        DAO instance is garbage collected, a Redis backend keeps them server-side.
        """
        self.dao.close()
        self._flush()

    def _insert_generated(self, target: str, validity_minutes: int) -> ShortURLModel:
        # NOTE: generate() only checks the shortcode is free at that moment, a concurrent
        #       create may still claim it first. insert() is the atomic arbiter, losers redraw.
        for _ in range(GENERATED_INSERT_ATTEMPTS):
            short_url = ShortURLModel(
                target=target,
                shortcode=self.generator.generate(self.dao.exists),
                created_at=self.clock(),
                validity_minutes=validity_minutes,
            )
            try:
                self.dao.insert(short_url)
            except ShortURLAlreadyExistsError:
                logger.debug('Generated shortcode was claimed concurrently. Retrying.', extra={'shortcode': short_url.shortcode})
            else:
                return short_url

        raise ShortcodeGenerationError(f'Failed to insert a generated shortcode after {GENERATED_INSERT_ATTEMPTS} attempts.')

    def _emit(self, type: EventType, event: str, payload: dict[str, Any]) -> None:
        try:
            self.access_log.log(type, event, payload)
        except Exception:
            # Access logging is best effort and must never fail the store operation
            logger.exception('Failed to write access log entry.', extra={'type': str(type), 'event': event})

    def _flush(self) -> None:
        try:
            self.access_log.flush()
        except Exception:
            logger.exception('Failed to flush access log.')
