"""Unit tests for helper functions in helpers.py.

Test coverage includes:

1. base_url() correct extraction
   - 1.1. Ensures URLs include the stage (e.g., `/Prod`) when invoked via AWS.
   - 1.2. Ensures URLs do NOT include stage information for custom domains.
   - 1.3. Ensures local SAM domains are served over http.
   - 1.4. Confirms a proper localhost fallback is returned when no domain is present.

2. get_short_url() retrieves short URL string representation

3. Time helpers
   - utc_now() is timezone-aware.
   - isoformat_utc() renders milliseconds and a 'Z' suffix.

4. require_environment() decorator behavior

5. guarantee_500_response() decorator behavior

6. running_locally() behavior
"""

import json
from datetime import datetime, timedelta, timezone, UTC

import pytest
from freezegun import freeze_time

from ttlshortener.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from ttlshortener.exceptions import MissingEnvironmentVariableError
from ttlshortener.utils.helpers import (
    base_url,
    get_short_url,
    utc_now,
    isoformat_utc,
    require_environment,
    guarantee_500_response,
    running_locally,
)


# -------------------------------
# 1.1. AWS default domain handling
# -------------------------------


@pytest.mark.parametrize(
    'domain, stage, expected',
    [
        ('abc123.execute-api.us-east-1.amazonaws.com', 'Dev', 'https://abc123.execute-api.us-east-1.amazonaws.com/Dev'),
        ('abc123.execute-api.us-east-1.amazonaws.com', 'Prod', 'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'),
    ],
)
def test_base_url_with_aws_domain(domain, stage, expected):
    """Ensure base_url() appends stage for default AWS execute-api domains."""
    event = {'requestContext': {'domainName': domain, 'stage': stage}}
    assert base_url(event) == expected


# -------------------------------
# 1.2. Custom domain handling
# -------------------------------


@pytest.mark.parametrize(
    'domain, stage, expected',
    [
        ('sho.rt', 'Prod', 'https://sho.rt'),
        ('links.example.com', 'Dev', 'https://links.example.com'),
    ],
)
def test_base_url_with_custom_domain(domain, stage, expected):
    """Ensure base_url() excludes stage for custom user-defined domains."""
    event = {'requestContext': {'domainName': domain, 'stage': stage}}
    assert base_url(event) == expected


# -------------------------------
# 1.3. Local domains
# -------------------------------


@pytest.mark.parametrize('domain', ['localhost:3000', '127.0.0.1:3000'])
def test_base_url_with_local_domain(domain):
    event = {'requestContext': {'domainName': domain, 'stage': 'Prod'}}
    assert base_url(event) == f'http://{domain}'


# -------------------------------
# 1.4. Fallback
# -------------------------------


@pytest.mark.parametrize('event', [{}, {'requestContext': {}}, {'requestContext': {'stage': 'Prod'}}])
def test_base_url_fallback(event):
    assert base_url(event) == 'http://localhost:3000'


# -------------------------------
# 2. get_short_url()
# -------------------------------


def test_get_short_url():
    event = {'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}}
    assert get_short_url('go-ab12cd34', event) == 'https://sho.rt/go-ab12cd34'
    assert get_short_url('go-ab12cd34', {}) == 'http://localhost:3000/go-ab12cd34'


# -------------------------------
# 3. Time helpers
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_utc_now_is_timezone_aware():
    now = utc_now()

    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)
    assert now == datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    'moment, expected',
    [
        (datetime(2025, 10, 15, 12, 30, tzinfo=UTC), '2025-10-15T12:30:00.000Z'),
        (datetime(2025, 10, 15, 12, 30, 5, 123456, tzinfo=UTC), '2025-10-15T12:30:05.123Z'),
        (datetime(2025, 10, 15, 14, 30, tzinfo=timezone(timedelta(hours=2))), '2025-10-15T12:30:00.000Z'),
        (datetime(2025, 12, 31, 23, 59, 59, 999999, tzinfo=UTC), '2025-12-31T23:59:59.999Z'),
    ],
)
def test_isoformat_utc(moment, expected):
    assert isoformat_utc(moment) == expected


# -------------------------------
# 4. require_environment()
# -------------------------------


def test_require_environment_with_all_variables_present(monkeypatch):
    monkeypatch.setenv('MONKEY_A', 'a')
    monkeypatch.setenv('MONKEY_B', 'b')

    @require_environment('MONKEY_A', 'MONKEY_B')
    def decorated(x):
        return x * 2

    assert decorated(21) == 42


def test_require_environment_with_missing_variables(monkeypatch):
    monkeypatch.setenv('MONKEY_A', 'a')
    monkeypatch.setenv('MONKEY_B', '')
    monkeypatch.delenv('MONKEY_C', raising=False)

    @require_environment('MONKEY_A', 'MONKEY_B', 'MONKEY_C')
    def decorated():
        return 'never reached'

    with pytest.raises(MissingEnvironmentVariableError) as exc_info:
        decorated()

    assert str(exc_info.value) == "Missing required environment variables: 'MONKEY_B', 'MONKEY_C'"


# -------------------------------
# 5. guarantee_500_response()
# -------------------------------


@guarantee_500_response
def exploding_handler(event, context):
    raise RuntimeError('kaboom')


@guarantee_500_response
def happy_handler(event, context):
    return {'statusCode': 200, 'body': '{}'}


def test_guarantee_500_response_passes_through_results(monkeypatch):
    monkeypatch.setenv(ENV.App.APP_ENV, 'prod')
    assert happy_handler({}, None) == {'statusCode': 200, 'body': '{}'}


def test_guarantee_500_response_converts_errors(monkeypatch):
    monkeypatch.setenv(ENV.App.APP_ENV, 'prod')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)

    response = exploding_handler({}, None)

    assert response['statusCode'] == 500
    assert json.loads(response['body']) == {
        'message': 'Internal Server Error',
        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
    }


def test_guarantee_500_response_reraises_locally(monkeypatch):
    monkeypatch.setenv(ENV.App.APP_ENV, 'local')

    with pytest.raises(RuntimeError, match='kaboom'):
        exploding_handler({}, None)


# -------------------------------
# 6. running_locally()
# -------------------------------


@pytest.mark.parametrize(
    'app_env, sam_flag, expected',
    [
        ('local', None, True),
        ('LOCAL', None, True),
        ('dev', None, False),
        ('dev', 'true', True),
        ('prod', 'false', False),
    ],
)
def test_running_locally(monkeypatch, app_env, sam_flag, expected):
    """running_locally() evaluates local execution correctly."""
    monkeypatch.setenv(ENV.App.APP_ENV, app_env)

    if sam_flag is None:
        monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    else:
        monkeypatch.setenv(ENV.App.AWS_SAM_LOCAL, sam_flag)

    assert running_locally() is expected
