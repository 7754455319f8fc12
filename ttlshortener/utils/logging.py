"""Structured logging for the Lambda functions

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every record is written to stdout as one JSON document, tagged with the
application and environment it came from:
{
    "timestamp": "2025-10-15T12:00:00.000Z",
    "level": "WARNING",
    "logger": "ttlshortener.allocator",
    "message": "Code allocation exhausted all attempts.",
    "app": "ttlshortener",
    "env": "prod",
    "seed": "go-",
    "maxAttempts": 20
}

Keys passed via `extra=` are merged into the document as-is.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from ttlshortener.constants import ENV


# Attributes every LogRecord carries; anything else came in through `extra=`
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.INFO, '', 0, '', (), None))) | {'message', 'asctime'}

# Third-party loggers that are only interesting when they complain
NOISY_LOGGERS = ('botocore', 'boto3', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render LogRecords (with their extras) as single-line JSON documents"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.context = {
            'app': os.getenv(ENV.App.APP_NAME),
            'env': os.getenv(ENV.App.APP_ENV),
        }

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update({key: value for key, value in self.context.items() if value})
        log.update({key: value for key, value in vars(record).items() if key not in RESERVED_ATTRS})

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # Unserializable extras (datetimes, sets, ...) are stringified
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {'()': JsonFormatter},
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'loggers': {name: {'level': 'WARNING'} for name in NOISY_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
