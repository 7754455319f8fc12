class TTLShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:ttlshortener_error'


class InvalidInputError(TTLShortenerError):
    """Raised when a create request carries missing or malformed fields."""

    error_code = 'core:invalid_input_error'


class AllocationExhaustedError(TTLShortenerError):
    """Raised when every allocation attempt collided with a live link.

    Safe for the caller to retry later.
    """

    error_code = 'core:allocation_exhausted_error'


class AllocationCancelledError(TTLShortenerError):
    """Raised when the caller cancelled an allocation before it completed."""

    error_code = 'core:allocation_cancelled_error'


class ConfigurationError(TTLShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class InfrastructureError(TTLShortenerError):
    """Base exception for all infrastructure (AWS) errors."""

    error_code = 'infra:infrastructure_error'


class AppConfigError(InfrastructureError):
    """Raised when AppConfig responds with erroneous data."""

    error_code = 'infra:appconfig_error'
