import json
import functools
import logging

from ttlshortener.types import LambdaEvent, LambdaContext, LambdaDiagnosticResponse
from ttlshortener.service import ShortLinkService
from ttlshortener.constants import Defaults
from ttlshortener.dao.exceptions import DataStoreError
from ttlshortener.exceptions import ConfigurationError, InfrastructureError, TTLShortenerError
from ttlshortener.utils import load_config, app_prefix
from ttlshortener.lambdas.reclaim_expired.constants import SUCCESS, ERROR


logger = logging.getLogger(__name__)


@functools.cache
def short_link_service() -> ShortLinkService:
    return ShortLinkService.from_config(load_config('reclaim_expired'), prefix=app_prefix())


def response_success(*, reclaimed: int) -> LambdaDiagnosticResponse:
    return json.dumps(
        {
            'status': SUCCESS,
            'reclaimed': reclaimed,
            'message': f'Successfully reclaimed {reclaimed} expired short link(s)',
        }
    )


def response_error(*, error: TTLShortenerError | Exception) -> LambdaDiagnosticResponse:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to reclaim expired short links',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaDiagnosticResponse:
    """Purge expired short links on a schedule (EventBridge).

    Reclamation only frees storage. Expired links already fail to resolve
    whether or not this function runs.

    Event (optional):
        batchSize: number of links deleted per storage round trip

    Diagnostic responses (NOT valid HTTP responses):
        `success`:
            status: success
            reclaimed: <count>
            message: Successfully reclaimed <count> expired short link(s)
        `error`:
            status: error
            message: Failed to reclaim expired short links
            reason: <reason>
            error: <error class name> (e.g. DataStoreError, AppConfigError)
    """
    try:
        batch_size = int((event or {}).get('batchSize', Defaults.RECLAIM_BATCH_SIZE))
        reclaimed = short_link_service().reclaim(batch_size=batch_size)
    except (ConfigurationError, InfrastructureError, DataStoreError, TypeError, ValueError) as error:
        logger.exception(
            'Failed to reclaim expired short links.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        logger.info(
            'Reclaimed %s expired short link(s).',
            reclaimed,
            extra={'event': SUCCESS, 'reclaimed': reclaimed},
        )
        return response_success(reclaimed=reclaimed)
