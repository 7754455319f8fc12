# Log event / error codes for the redirect_url lambda
MISSING_CODE = 'MISSING_CODE'
SHORT_LINK_NOT_FOUND = 'SHORT_LINK_NOT_FOUND'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'

# Seconds a client should wait before retrying a 503
RETRY_AFTER_SECONDS = 1
