import json
import functools
import logging

from ttlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from ttlshortener.service import ShortLinkService
from ttlshortener.dao.exceptions import DataStoreError
from ttlshortener.exceptions import AllocationExhaustedError, ConfigurationError, InfrastructureError, InvalidInputError
from ttlshortener.utils import load_config, get_short_url, app_prefix
from ttlshortener.utils.helpers import guarantee_500_response
from ttlshortener.utils.responses import response_201, response_400, response_500, response_503
from ttlshortener.lambdas.shorten_url.constants import (
    INVALID_JSON,
    MISSING_FIELDS,
    INVALID_INPUT,
    ALLOCATION_EXHAUSTED,
    STORAGE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    SHORT_LINK_CREATED,
    RETRY_AFTER_SECONDS,
)


logger = logging.getLogger(__name__)


@functools.cache
def short_link_service() -> ShortLinkService:
    """Build the service once per execution environment (reused across warm invocations)."""
    return ShortLinkService.from_config(load_config('shorten_url'), prefix=app_prefix())


def _first_present(body: dict, *names: str):
    for name in names:
        if body.get(name) not in (None, ''):
            return body[name]
    return None


def _parse_lifetime(value):
    # HTML forms submit numbers as strings
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    return value


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to create short links

    This Lambda handler follows this procedure to create short links:
    - Step 1: Build (or reuse) the short link service from AppConfig
    - Step 2: Extract url, lifetime and seed from request body
    - Step 3: Allocate a code and store the mapping (via ShortLinkService)
    - Step 4: Respond to user with 201 created

    Request body:
        url: target URL (http or https)
        lifetimeMinutes: positive number of minutes the link stays resolvable
                         (`validity` accepted as an alias)
        seed: prefix of the generated code (`shortcode` accepted as an alias)

    HTTP responses:
        201: Short link created
            shortLink: full short URL
            code: generated code
            expiresAt: ISO-8601 UTC expiry instant
        400: Bad client request (invalid JSON, missing or malformed fields)
        500: Internal server error (configuration problems)
        503: Service unavailable (codes exhausted or storage unavailable); retry later

    Example:
        >>> event = {'body': '{"url": "https://example.com", "lifetimeMinutes": 30, "seed": "go-"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['code']
        'go-ab12cd34'
    """
    # 1- Get the short link service
    try:
        service = short_link_service()
    except (ConfigurationError, InfrastructureError) as error:
        logger.exception('Failed to configure shorten URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=error.error_code)
    except DataStoreError:
        logger.exception('Data store unreachable. Responding with 503.', extra={'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=RETRY_AFTER_SECONDS, message='storage unavailable', error_code=STORAGE_UNAVAILABLE)

    # 2- Extract url, lifetime and seed from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON)

    url = _first_present(request_body, 'url')
    lifetime_minutes = _parse_lifetime(_first_present(request_body, 'lifetimeMinutes', 'validity'))
    seed = _first_present(request_body, 'seed', 'shortcode')
    if url is None or lifetime_minutes is None or seed is None:
        logger.info('Missing required fields. Responding with 400.', extra={'event': MISSING_FIELDS})
        return response_400(message="missing 'url', 'lifetimeMinutes' or 'seed' in JSON body", error_code=MISSING_FIELDS)

    # 3- Allocate a code and store the mapping
    try:
        created = service.create(url=url, lifetime_minutes=lifetime_minutes, seed=seed)
    except InvalidInputError as error:
        logger.info('Invalid create request. Responding with 400.', extra={'event': INVALID_INPUT, 'reason': str(error)})
        return response_400(message=str(error), error_code=INVALID_INPUT)
    except AllocationExhaustedError:
        logger.warning('No free code found for seed. Responding with 503.', extra={'event': ALLOCATION_EXHAUSTED, 'seed': seed})
        return response_503(retry_after=RETRY_AFTER_SECONDS, message='no free code available, try again', error_code=ALLOCATION_EXHAUSTED)
    except DataStoreError:
        logger.exception('Data store failed while creating short link. Responding with 503.', extra={'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=RETRY_AFTER_SECONDS, message='storage unavailable', error_code=STORAGE_UNAVAILABLE)

    # 4- Respond with the evaluated expiry instant
    short_link = get_short_url(created['code'], event)
    logger.info('Created short link. Responding with 201.', extra={'event': SHORT_LINK_CREATED, 'code': created['code']})
    return response_201(
        {
            'message': f'Successfully shortened {url} to {short_link}',
            'shortLink': short_link,
            'code': created['code'],
            'expiresAt': created['expiresAt'],
        }
    )
