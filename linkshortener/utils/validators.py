"""Validation helpers for shorten requests

Every helper either returns the normalized value or raises the matching
ValidationError subclass, so the store can validate a whole request before
it touches the data store.

Functions:
    is_valid_url(url) -> bool
        True if `url` is an absolute URL (scheme + host).
    validate_target_url(url) -> str
        Return `url` or raise InvalidURLError.
    validate_shortcode(shortcode) -> str
        Return `shortcode` or raise InvalidShortcodeError.
    validate_validity_minutes(value, default) -> int
        Return the validity period in minutes or raise InvalidValidityError.

Example:
    >>> validate_target_url('https://example.com/page')
    'https://example.com/page'
    >>> validate_validity_minutes('15')
    15
    >>> validate_shortcode('no')
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.InvalidShortcodeError: Shortcode 'no' must be 4-12 characters of [A-Za-z0-9_-].
"""

import re
from typing import Any
from urllib.parse import urlparse

from linkshortener.constants import Shortcode, Defaults
from linkshortener.dao.exceptions import InvalidURLError, InvalidShortcodeError, InvalidValidityError


MAX_URL_LENGTH = 2048

_SHORTCODE_RE = re.compile(Shortcode.CUSTOM_PATTERN)
_WHITESPACE_RE = re.compile(r'\s')


def is_valid_url(url: Any) -> bool:
    """Check that `url` parses as an absolute URL with both scheme and host

    Args:
        url (Any): candidate destination URL

    Returns:
        bool: True if valid, False otherwise.

    Example:
        >>> is_valid_url('https://example.com')
        True
        >>> is_valid_url('not a url')
        False
    """
    if not isinstance(url, str) or not url or len(url) > MAX_URL_LENGTH:
        return False
    if _WHITESPACE_RE.search(url):
        return False

    try:
        components = urlparse(url)
        hostname = components.hostname
    except ValueError:
        # e.g. malformed IPv6 netloc or invalid port
        return False

    return bool(components.scheme) and bool(hostname)


def validate_target_url(url: Any) -> str:
    if not is_valid_url(url):
        raise InvalidURLError(f"Invalid URL format: '{url}'.")
    return url


def validate_shortcode(shortcode: Any) -> str:
    if not isinstance(shortcode, str) or not _SHORTCODE_RE.fullmatch(shortcode):
        raise InvalidShortcodeError(
            f"Shortcode '{shortcode}' must be {Shortcode.CUSTOM_MIN_LENGTH}-{Shortcode.CUSTOM_MAX_LENGTH} characters of [A-Za-z0-9_-]."
        )
    return shortcode


def validate_validity_minutes(value: Any, default: int = Defaults.VALIDITY_MINUTES) -> int:
    """Normalize a validity period to a positive number of minutes

    Accepts integers, integral floats (e.g. 15.0) and numeric strings
    (e.g. "15", as submitted by forms). `None` means "use the default".

    Args:
        value (Any):
            Requested validity period in minutes.
        default (int):
            Period used when `value` is None. Defaults to 30.

    Returns:
        int: validity period in minutes.

    Raises:
        InvalidValidityError:
            If the value is non-numeric, fractional, zero, negative or
            longer than Defaults.MAX_VALIDITY_MINUTES (~10 years).
    """
    if value is None:
        return default

    minutes = None
    # NOTE: bool is a subclass of int, `True` must not mean "1 minute"
    if isinstance(value, bool):
        minutes = None
    elif isinstance(value, int):
        minutes = value
    elif isinstance(value, float) and value.is_integer():
        minutes = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        try:
            minutes = int(value.strip())
        except ValueError:
            # e.g. more digits than int() accepts
            minutes = None

    if minutes is None or not 0 < minutes <= Defaults.MAX_VALIDITY_MINUTES:
        raise InvalidValidityError(
            f'Validity must be a whole number of minutes between 1 and {Defaults.MAX_VALIDITY_MINUTES} (given value: {value!r:.40}).'
        )
    return minutes
