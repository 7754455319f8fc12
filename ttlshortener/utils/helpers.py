"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given code
    running_locally() -> bool
        Whether the code runs under SAM local invoke/api
    utc_now() -> datetime
        Current instant as a timezone-aware UTC datetime
    isoformat_utc() -> str
        Render an instant as ISO-8601 with milliseconds and a 'Z' suffix
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler errors into a 500 response

Example:
    >>> get_short_url('go-ab12cd34', {'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}})
    'https://sho.rt/go-ab12cd34'
"""

import os
import functools
import logging
from datetime import datetime, UTC
from collections.abc import Callable

from ttlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from ttlshortener.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from ttlshortener.exceptions import MissingEnvironmentVariableError
from ttlshortener.utils.responses import response_500


logger = logging.getLogger(__name__)


LOCAL_BASE_URL = 'http://localhost:3000'


def base_url(event: LambdaEvent) -> str:
    """Public origin that short links are served from, derived from the request.

    | domainName                          | result                                  |
    |-------------------------------------|-----------------------------------------|
    | localhost:3000 / 127.0.0.1:3000     | http://<domain>                         |
    | sho.rt (custom domain)              | https://sho.rt                          |
    | abc123.execute-api.<region>...      | https://<domain>/<stage>                |
    | missing (direct invoke, tests)      | http://localhost:3000                   |
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName') or ''
    stage = request_context.get('stage') or ''

    if not domain:
        return LOCAL_BASE_URL
    if domain.startswith(('localhost', '127.0.0.1')):
        return f'http://{domain}'
    if 'execute-api' in domain:
        return f'https://{domain}/{stage}'.rstrip('/')
    return f'https://{domain}'


def get_short_url(code: str, event: LambdaEvent) -> str:
    """Get string representation of a short link for a given code"""
    return f'{base_url(event).rstrip("/")}/{code}'


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def utc_now() -> datetime:
    return datetime.now(UTC)


def isoformat_utc(moment: datetime) -> str:
    """Render a timezone-aware instant as ISO-8601 in UTC.

    Example:
        >>> isoformat_utc(datetime(2025, 10, 15, 12, 30, tzinfo=UTC))
        '2025-10-15T12:30:00.000Z'
    """
    return moment.astimezone(UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def require_environment(*names: str) -> Callable:
    """Check `names` in os.environ on every call, before the wrapped function runs.

    Unset and empty variables both count as missing; all of them are reported
    in one MissingEnvironmentVariableError, quoted and in the order given.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            absent = ', '.join(repr(name) for name in names if not os.environ.get(name))
            if absent:
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {absent}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with 500 instead of crashing on unexpected handler errors.

    When running locally (SAM), the error is re-raised so it shows up in the console.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled error in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
