"""Exceptions related to Data Access Objects (DAO) operations.

Every failure the mapping store can surface to its callers lives here, so
transport layers only need a single import to translate them.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ValidationError:
        Base class for rejected create requests (nothing is stored).

    InvalidURLError:
        Raised when the destination is not an absolute URL (scheme + host).

    InvalidValidityError:
        Raised when the validity period is not a positive integer of minutes.

    InvalidShortcodeError:
        Raised when a requested shortcode doesn't match [A-Za-z0-9_-]{4,12}.

    ShortURLAlreadyExistsError:
        Raised when attempting to insert a ShortURLModel that already exists.

    ShortURLNotFoundError:
        Raised when a ShortURLModel is not found in the data store.

    ShortURLExpiredError:
        Raised when resolving a ShortURLModel past its validity window.

    ShortcodeGenerationError:
        Raised when no free shortcode could be generated.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, time, OOM, etc.).

Example:
    >>> from linkshortener.dao.exceptions import ShortURLExpiredError
    >>> raise ShortURLExpiredError("Short URL with code 'abc123' has expired.")
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.ShortURLExpiredError: Short URL with code 'abc123' has expired.
"""

from linkshortener.exceptions import LinkShortenerError


class DAOError(LinkShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ValidationError(DAOError):
    """Base class for create requests rejected before any mutation."""

    error_code = 'dao:validation_error'


class InvalidURLError(ValidationError):
    """Exception raised when a destination URL fails validation."""

    error_code = 'INVALID_URL'


class InvalidValidityError(ValidationError):
    """Exception raised when a validity period is non-positive or non-numeric."""

    error_code = 'INVALID_VALIDITY'


class InvalidShortcodeError(ValidationError):
    """Exception raised when a requested shortcode has an invalid format."""

    error_code = 'INVALID_CODE_FORMAT'


class ShortURLAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a ShortURLModel that already exists in the data store."""

    error_code = 'CODE_CONFLICT'


class ShortURLNotFoundError(DAOError):
    """Exception raised when a ShortURLModel is not found in the data store."""

    error_code = 'SHORT_URL_NOT_FOUND'


class ShortURLExpiredError(DAOError):
    """Exception raised when a ShortURLModel exists but its validity window has passed."""

    error_code = 'SHORT_URL_EXPIRED'


class ShortcodeGenerationError(DAOError):
    """Exception raised when a unique shortcode cannot be generated."""

    error_code = 'GENERATOR_EXHAUSTED'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'DATA_STORE_ERROR'
