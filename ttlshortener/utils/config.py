"""Runtime configuration for the Lambda functions, served by AWS AppConfig.

One AppConfig *Application* (`APP_NAME`) holds an *Environment* per `APP_ENV`.
Its configuration profile (`backend-config` by default) is a single JSON
document shared by every function:

    {
        "build": 42,
        "active_backend": "redis",
        "allocator": {"max_attempts": 20, "suffix_length": 8},
        "configs": {
            "shorten_url":     {"redis": {"host": "...", "port": 6379, "db": 0, "socket_timeout": 2.0}},
            "redirect_url":    {"redis": { ... }},
            "reclaim_expired": {"redis": { ... }}
        }
    }

`load_config(name)` narrows the document down to what one function needs:
the section of its active backend plus the shared (optional) allocator
settings, e.g. `{'redis': {...}, 'allocator': {...}}`.

Under `sam local` the document is read from a local AppConfig agent instead,
when `APPCONFIG_AGENT_URL` points at one.

Example:
    >>> config = load_config('redirect_url')
    >>> config['redis']['port']
    6379
"""

import os
import json
import urllib.parse
import urllib.request
import logging

import boto3

from ttlshortener.types import AppConfig, AppConfigDataClient, LambdaConfiguration
from ttlshortener.constants import ENV
from ttlshortener.utils.helpers import require_environment, running_locally
from ttlshortener.exceptions import AppConfigError, BadConfigurationError


logger = logging.getLogger(__name__)

LOCAL_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
LOCAL_AGENT_PORTS = frozenset({2772, None})
DEFAULT_PROFILE_NAME = 'backend-config'


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Namespace for storage keys: '<APP_NAME>:<APP_ENV>', or None without an app name."""
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def extract_lambda_config(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Pick the active backend section for one Lambda out of a full AppConfig document.

    Raises:
        AppConfigError:
            If the document lacks the active backend or the Lambda's section.
    """
    try:
        backend = document['active_backend']
        data = {backend: document['configs'][lambda_name][backend]}
    except (KeyError, TypeError) as e:
        raise AppConfigError(f"AppConfig document has no '{lambda_name}' configuration for the active backend.") from e

    data['allocator'] = dict(document.get('allocator') or {})
    return data


def validate_agent_url(url: str | None) -> str | None:
    """Accept only http(s) URLs of a local AppConfig agent; None/empty means 'no agent'.

    Raises:
        BadConfigurationError: If the URL points anywhere but a known local agent.
    """
    if not url:
        return None

    components = urllib.parse.urlparse(url)
    if components.scheme not in {'http', 'https'}:
        raise BadConfigurationError(f'AppConfig agent URL must use http or https (given: {url}).')
    if components.hostname not in LOCAL_AGENT_HOSTS:
        raise BadConfigurationError(f'AppConfig agent URL must point at a local agent (given: {url}).')
    if components.port not in LOCAL_AGENT_PORTS:
        raise BadConfigurationError(f'AppConfig agent URL must use port 2772 (given: {url}).')
    return url.rstrip('/')


def _parse_document(content: bytes, source: str) -> AppConfig:
    try:
        return json.loads(content.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise AppConfigError(f'{source} returned a document which is not valid JSON.') from e


def _fetch_from_agent(agent_url: str) -> AppConfig:
    profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

    logger.debug('Fetching AppConfig document from local agent.', extra={'agentUrl': url})
    with urllib.request.urlopen(url, timeout=5) as response:  # noqa: S310
        return _parse_document(response.read(), 'AppConfig agent')


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _fetch_from_appconfig() -> AppConfig:
    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)

    return _parse_document(response['Configuration'].read(), 'AppConfig')


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load one Lambda's configuration (active backend + allocator settings).

    Raises:
        MissingEnvironmentVariableError:
            If the AppConfig identifiers are not set.
        BadConfigurationError:
            If a local agent URL is set but not acceptable.
        AppConfigError:
            If the document is not valid JSON or lacks the Lambda's section.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    agent_url = validate_agent_url(os.getenv(ENV.AppConfig.AGENT_URL)) if running_locally() else None
    document = _fetch_from_agent(agent_url) if agent_url else _fetch_from_appconfig()

    data = extract_lambda_config(document, lambda_name)
    logger.debug(
        'Loaded AppConfig document.',
        extra={'lambdaName': lambda_name, 'build': document.get('build'), 'source': 'agent' if agent_url else 'appconfig'},
    )
    return data
