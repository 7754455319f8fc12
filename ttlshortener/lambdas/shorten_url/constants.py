# Log event / error codes for the shorten_url lambda
INVALID_JSON = 'INVALID_JSON'
MISSING_FIELDS = 'MISSING_FIELDS'
INVALID_INPUT = 'INVALID_INPUT'
ALLOCATION_EXHAUSTED = 'ALLOCATION_EXHAUSTED'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
SHORT_LINK_CREATED = 'SHORT_LINK_CREATED'

# Seconds a client should wait before retrying a 503
RETRY_AFTER_SECONDS = 1
