import functools
import logging

from ttlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from ttlshortener.service import ShortLinkService
from ttlshortener.dao.exceptions import DataStoreError, ShortLinkNotFoundError
from ttlshortener.exceptions import ConfigurationError, InfrastructureError
from ttlshortener.utils import load_config, get_short_url, app_prefix
from ttlshortener.utils.helpers import guarantee_500_response
from ttlshortener.utils.responses import response_302, response_400, response_404, response_500, response_503
from ttlshortener.lambdas.redirect_url.constants import (
    MISSING_CODE,
    SHORT_LINK_NOT_FOUND,
    STORAGE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    REDIRECT_SUCCESS,
    RETRY_AFTER_SECONDS,
)


logger = logging.getLogger(__name__)


@functools.cache
def short_link_service() -> ShortLinkService:
    return ShortLinkService.from_config(load_config('redirect_url'), prefix=app_prefix())


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to follow short links

    This Lambda handler follows this procedure to redirect clients:
    - Step 1: Build (or reuse) the short link service from AppConfig
    - Step 2: Extract code from request path
    - Step 3: Resolve the code to its target URL
    - Step 4: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Missing code in path parameters
        404: Unknown or expired short link (not distinguished)
        500: Internal server error
        503: Storage unavailable; retry later

    Example:
        >>> event = {'pathParameters': {'code': 'go-ab12cd34'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Get the short link service
    try:
        service = short_link_service()
    except (ConfigurationError, InfrastructureError) as error:
        logger.exception('Failed to configure redirect URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=error.error_code)
    except DataStoreError:
        logger.exception('Data store unreachable. Responding with 503.', extra={'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=RETRY_AFTER_SECONDS, message='storage unavailable', error_code=STORAGE_UNAVAILABLE)

    # 2- Extract code from request's path
    code = (event.get('pathParameters') or {}).get('code')
    if not code:
        logger.info('Missing "code" in path. Responding with 400.', extra={'event': MISSING_CODE})
        return response_400(message="missing 'code' in path", error_code=MISSING_CODE)
    logger.debug('Client requested short link %s.', get_short_url(code, event))

    # 3- Resolve the code
    try:
        target_url = service.resolve(code)['url']
    except ShortLinkNotFoundError:
        logger.info(
            'Short link not found or expired. Responding with 404.',
            extra={'code': code, 'event': SHORT_LINK_NOT_FOUND},
        )
        return response_404(message=f"short link {get_short_url(code, event)} doesn't exist", error_code=SHORT_LINK_NOT_FOUND)
    except DataStoreError:
        logger.exception('Data store failed while resolving. Responding with 503.', extra={'code': code, 'event': STORAGE_UNAVAILABLE})
        return response_503(retry_after=RETRY_AFTER_SECONDS, message='storage unavailable', error_code=STORAGE_UNAVAILABLE)

    # 4- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'code': code, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
