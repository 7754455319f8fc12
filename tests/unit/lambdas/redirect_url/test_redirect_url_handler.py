"""Unit tests for the redirect_url AWS Lambda handler.

Test coverage includes:

1. Successful redirect
   - Ensures live codes redirect with HTTP 302 and a Location header.

2. Missing code
   - Ensures events without a `code` path parameter return HTTP 400.

3. Unknown or expired code
   - Ensures unknown, expired and malformed codes all return the same HTTP 404.

4. Failures
   - Ensures configuration errors return HTTP 500 and storage errors HTTP 503.
"""

import json
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest

from ttlshortener.lambdas.redirect_url import app
from ttlshortener.models import ShortLinkModel
from ttlshortener.service import ShortLinkService
from ttlshortener.dao.memory import ShortLinkMemoryDAO
from ttlshortener.dao.exceptions import DataStoreError
from ttlshortener.exceptions import BadConfigurationError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture()
def apigw_event():
    def _event(code):
        return {
            'resource': '/{code}',
            'path': f'/{code}',
            'httpMethod': 'GET',
            'pathParameters': None if code is None else {'code': code},
            'requestContext': {
                'resourcePath': '/{code}',
                'httpMethod': 'GET',
                'domainName': 'testhost:1000',
                'stage': 'test',
            },
        }

    return _event


@pytest.fixture()
def context():
    class _Context:
        function_name = 'redirect_url'

    return _Context()


@pytest.fixture()
def dao(now):
    _dao = ShortLinkMemoryDAO()
    _dao.insert(
        ShortLinkModel(
            code='go-ab12cd34',
            target='https://example.com/blog/chuck-norris-is-awesome',
            created_at=now,
            expires_at=now + timedelta(minutes=1),
        )
    )
    return _dao


@pytest.fixture()
def service(dao, clock):
    return ShortLinkService(dao, clock=clock)


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, service):
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.setattr(app, 'short_link_service', lambda: service)


# -------------------------------
# 1. Successful redirect
# -------------------------------


def test_lambda_handler(apigw_event, context):
    response = app.lambda_handler(apigw_event('go-ab12cd34'), context)

    assert response['statusCode'] == 302
    assert response['headers']['Location'] == 'https://example.com/blog/chuck-norris-is-awesome'


def test_lambda_handler_just_before_expiry(apigw_event, context, clock):
    clock.advance(timedelta(seconds=59))

    response = app.lambda_handler(apigw_event('go-ab12cd34'), context)

    assert response['statusCode'] == 302


# -------------------------------
# 2. Missing code
# -------------------------------


@pytest.mark.parametrize('code', [None, ''])
def test_lambda_handler_with_missing_code(apigw_event, context, code):
    response = app.lambda_handler(apigw_event(code), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['errorCode'] == 'MISSING_CODE'


# -------------------------------
# 3. Unknown or expired code
# -------------------------------


def test_lambda_handler_with_unknown_code(apigw_event, context):
    response = app.lambda_handler(apigw_event('go-unknown'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 404
    assert body == {
        'message': "Not Found (short link https://testhost:1000/go-unknown doesn't exist)",
        'errorCode': 'SHORT_LINK_NOT_FOUND',
    }


def test_lambda_handler_with_expired_code(apigw_event, context, clock):
    clock.advance(timedelta(seconds=61))

    expired = app.lambda_handler(apigw_event('go-ab12cd34'), context)
    unknown = app.lambda_handler(apigw_event('go-zz99yy88'), context)

    assert expired['statusCode'] == unknown['statusCode'] == 404
    assert json.loads(expired['body'])['errorCode'] == json.loads(unknown['body'])['errorCode']


@pytest.mark.parametrize('code', ['go%2Fetc', 'go ab', '../admin'])
def test_lambda_handler_with_malformed_code(apigw_event, context, code):
    response = app.lambda_handler(apigw_event(code), context)
    assert response['statusCode'] == 404


# -------------------------------
# 4. Failures
# -------------------------------


def test_lambda_handler_with_configuration_error(monkeypatch, apigw_event, context):
    monkeypatch.setattr(app, 'short_link_service', MagicMock(side_effect=BadConfigurationError('No supported backend')))

    response = app.lambda_handler(apigw_event('go-ab12cd34'), context)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == 'config:bad_configuration_error'


def test_lambda_handler_with_storage_error(monkeypatch, apigw_event, context):
    service = MagicMock()
    service.resolve.side_effect = DataStoreError('Timed out waiting for Redis')
    monkeypatch.setattr(app, 'short_link_service', lambda: service)

    response = app.lambda_handler(apigw_event('go-ab12cd34'), context)

    assert response['statusCode'] == 503
    assert response['headers']['Retry-After'] == '1'
    assert json.loads(response['body'])['errorCode'] == 'STORAGE_UNAVAILABLE'
