"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start, before any
other logging is done (the handlers' package does this on import).

Every record is rendered as a single JSON line on stdout. Fields passed
through `extra={...}` are attached at the top level:

{
    "timestamp": "2025-10-15T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkshortener.store",
    "message": "Created short URL.",
    "shortcode": "abc123",
    "validityMinutes": 30
}

Access log entries (see linkshortener.access_log.LoggerAccessLog) go through
the `linkshortener.access` logger and carry `type`, `event` and `payload`.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from linkshortener.constants import ENV


# Attributes every LogRecord carries. Anything else was passed via `extra`.
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime', 'taskName'}


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for key, value in vars(record).items():
            if key not in RESERVED_ATTRS and key not in log:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # Unknown types (datetimes, enums, models) are rendered with str()
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route all logging to stdout as JSON

    Args:
        level (str | None):
            Root log level. Defaults to `LOG_LEVEL`, or INFO if unset.
    """
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL, 'INFO')).upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
