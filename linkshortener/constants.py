import string
from enum import StrEnum


class Shortcode:
    """Shortcode format parameters."""

    # Generated codes: 26 lowercase + 26 uppercase + 10 digits
    ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
    LENGTH = 6
    MAX_ATTEMPTS = 50
    FALLBACK_EXTRA_LENGTH = 2

    # User-supplied codes
    CUSTOM_MIN_LENGTH = 4
    CUSTOM_MAX_LENGTH = 12
    CUSTOM_PATTERN = r'[A-Za-z0-9_-]{4,12}'


class Defaults:
    """Default link parameters."""

    VALIDITY_MINUTES = 30
    MAX_VALIDITY_MINUTES = 60 * 24 * 366 * 10  # ~10 years, keeps expires_at within datetime range
    MAX_BATCH_SIZE = 5  # Links accepted by a single shorten request
    CLICK_SOURCE = 'unknown'
    CLICK_LOCATION = 'Unknown'


class EventType(StrEnum):
    """Access log entry types."""

    CREATE = 'CREATE'
    CLICK = 'CLICK'
    ERROR = 'ERROR'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_PATH = 'LINKSHORTENER_CONFIG'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
