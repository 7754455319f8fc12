from ttlshortener.utils.config import app_env, app_name, app_prefix, load_config
from ttlshortener.utils.helpers import base_url, get_short_url, running_locally, utc_now, isoformat_utc, require_environment, guarantee_500_response
from ttlshortener.utils.shortener import generate_suffix
from ttlshortener.utils.validators import is_safe_code, validate_target_url, validate_lifetime_minutes, validate_seed
from ttlshortener.utils.logging import initialize_logging


__all__ = [
    'generate_suffix',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'running_locally',
    'utc_now',
    'isoformat_utc',
    'require_environment',
    'guarantee_500_response',
    'is_safe_code',
    'validate_target_url',
    'validate_lifetime_minutes',
    'validate_seed',
    'initialize_logging',
]
