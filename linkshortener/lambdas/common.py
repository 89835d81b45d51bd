"""Shared plumbing for the HTTP handlers

Responsibilities:
    - Own the process-wide MappingStore handle (built lazily from config,
      reused across warm invocations, torn down by reset_store());
    - Build API Gateway (Lambda proxy) responses;
    - Serialize ShortURLModel snapshots to JSON-compatible dicts.
"""

import json
import logging
import threading
from datetime import datetime
from typing import Any

from linkshortener.models import ShortURLModel
from linkshortener.store import MappingStore
from linkshortener.utils import load_config, app_prefix, get_short_url


logger = logging.getLogger(__name__)

_store: MappingStore | None = None
_store_lock = threading.Lock()


def get_store() -> MappingStore:
    """Return the process-wide store, building it from configuration on first use

    Raises:
        FileNotFoundError: explicit configuration file is missing.
        BadConfigurationError: configuration is invalid.
        DataStoreError: configured backend is unreachable.
    """
    global _store
    with _store_lock:
        if _store is None:
            config = load_config()
            logger.debug('Building mapping store.', extra={'backend': config['active_backend']})
            _store = MappingStore.from_config(config, prefix=app_prefix())
        return _store


def set_store(store: MappingStore | None) -> None:
    """Install an explicitly constructed store (e.g. a dev server or tests)"""
    global _store
    with _store_lock:
        _store = store


def reset_store() -> None:
    global _store
    with _store_lock:
        store, _store = _store, None
    if store is not None:
        store.close()


def isoformat(value: datetime) -> str:
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def serialize_short_url(short_url: ShortURLModel, event: dict[str, Any], now: datetime, include_clicks: bool = False) -> dict[str, Any]:
    data = {
        'shortcode': short_url.shortcode,
        'short_url': get_short_url(short_url.shortcode, event),
        'target_url': short_url.target,
        'created_at': isoformat(short_url.created_at),
        'validity_minutes': short_url.validity_minutes,
        'expires_at': isoformat(short_url.expires_at),
        'is_expired': short_url.is_expired(now),
        'click_count': short_url.click_count,
    }
    if include_clicks:
        data['clicks'] = [
            {
                'timestamp': isoformat(click.timestamp),
                'source': click.source,
                'location': click.location,
            }
            for click in short_url.clicks
        ]
    return data


def response(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(status_code: int, reason: str, message: str | None = None, error_code: str | None = None) -> dict[str, Any]:
    body = {'message': reason if not message else f'{reason} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return response(status_code, body)


def response_400(message: str | None = None, error_code: str | None = None) -> dict[str, Any]:
    return response_error(400, 'Bad Request', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> dict[str, Any]:
    return response_error(404, 'Not Found', message, error_code)


def response_410(message: str | None = None, error_code: str | None = None) -> dict[str, Any]:
    return response_error(410, 'Gone', message, error_code)


def response_302(*, location: str) -> dict[str, Any]:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }
