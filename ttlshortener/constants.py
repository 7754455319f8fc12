import string
from enum import StrEnum


class Defaults:
    """Default tuning values for code allocation and storage."""

    SUFFIX_LENGTH = 8  # 62**8 ~ 2.18e14 possible suffixes per seed
    MAX_ALLOCATION_ATTEMPTS = 20
    STORAGE_TIMEOUT_SECONDS = 2.0  # Upper bound for a single storage call
    RECLAIM_BATCH_SIZE = 500
    SEED_MAX_LENGTH = 32
    URL_MAX_LENGTH = 2048


# Alphabet for random code suffixes: 26 lowercase + 26 uppercase + 10 digits
CODE_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

# Characters allowed anywhere in a code (seed + suffix)
SAFE_CODE_PATTERN = r'^[A-Za-z0-9_-]+$'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
