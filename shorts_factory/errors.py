"""
Shorts Factory Error Classes

This module defines the exception hierarchy for script and asset
generation. All errors inherit from ShortsFactoryError, enabling
consistent error handling across providers, storage and the orchestrator.

Error Hierarchy:
    ShortsFactoryError (base)
    ├── ConfigurationError (missing API key / invalid settings)
    ├── GenerationCancelled (cooperative cancellation, not a failure)
    ├── ScriptValidationError (malformed structured script response)
    ├── StorageError (asset upload failures)
    └── ProviderError (provider operation failures)
        ├── RateLimitError (throttling, retried with backoff)
        ├── AuthenticationError
        ├── InvalidRequestError
        ├── TimeoutError
        └── NetworkError

Usage:
    >>> from shorts_factory.errors import ConfigurationError
    >>>
    >>> if not api_key:
    >>>     raise ConfigurationError("Gemini API Key is missing.")
"""


CANCELLED_MESSAGE = "Cancelled by user"


class ShortsFactoryError(Exception):
    """Base exception for all shorts-factory errors.

    Example:
        >>> try:
        >>>     script = await orchestrator.generate(topic, language)
        >>> except ShortsFactoryError as e:
        >>>     logger.error(f"Generation failed: {e}")
    """
    pass


class ConfigurationError(ShortsFactoryError):
    """Raised when configuration is invalid or missing.

    The most common case is a missing API key for the active provider.
    Raised before any network call is attempted.
    """
    pass


class GenerationCancelled(ShortsFactoryError):
    """Raised when a cancellation token is observed at a checkpoint.

    Callers must treat this as a neutral outcome ("generation cancelled")
    rather than as an error.
    """

    def __init__(self, message: str = CANCELLED_MESSAGE):
        super().__init__(message)


class ScriptValidationError(ShortsFactoryError):
    """Raised when the structured script response cannot be parsed.

    Covers invalid JSON and documents that fail required-field validation.
    Fatal to the request: no partial script is returned.
    """
    pass


class StorageError(ShortsFactoryError):
    """Raised when uploading an asset to the storage collaborator fails."""
    pass


class ProviderError(ShortsFactoryError):
    """Raised when a provider operation fails.

    The provider's own error message is kept verbatim in the exception
    text so it can be shown to the user (quota and billing issues are
    provider-specific).

    Attributes:
        status_code: HTTP status reported by the provider, if known
    """

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ProviderError):
    """Raised when the provider rate limit is exceeded (HTTP 429).

    This is the only error class the retry policy retries.
    """
    pass


class AuthenticationError(ProviderError):
    """Raised when provider authentication fails (invalid key, 401/403)."""
    pass


class InvalidRequestError(ProviderError):
    """Raised when the provider rejects the request parameters (400)."""
    pass


class TimeoutError(ProviderError):
    """Raised when a provider request times out."""
    pass


class NetworkError(ProviderError):
    """Raised when network connectivity issues prevent a request."""
    pass


def classify_provider_error(error: Exception, provider_name: str) -> ProviderError:
    """Map an SDK/HTTP exception onto the ProviderError hierarchy.

    An HTTP status, when the exception carries one, decides the class;
    only a 429 is ever a rate limit. Message keywords are consulted for
    errors without a status.

    Args:
        error: Exception raised by the provider SDK
        provider_name: Human readable provider name used as message prefix

    Returns:
        A ProviderError subclass instance wrapping the original message
    """
    if isinstance(error, ProviderError):
        return error

    status = status_of(error)
    message = str(error)
    if status is not None:
        error_class = _class_for_status(status, message.lower())
    else:
        error_class = _class_for_message(message.lower())

    if error_class is RateLimitError:
        return RateLimitError(f"{provider_name} rate limit exceeded: {message}", status_code=429)
    if error_class is AuthenticationError:
        return AuthenticationError(f"{provider_name} authentication failed: {message}", status_code=status)
    if error_class is InvalidRequestError:
        return InvalidRequestError(f"Invalid {provider_name} request: {message}", status_code=status)
    if error_class is TimeoutError:
        return TimeoutError(f"{provider_name} request timed out: {message}", status_code=status)
    if error_class is NetworkError:
        return NetworkError(f"Network error connecting to {provider_name}: {message}", status_code=status)
    return ProviderError(f"{provider_name} error: {message}", status_code=status)


def _class_for_status(status: int, lowered: str):
    if status == 429:
        return RateLimitError
    if status in (401, 403):
        return AuthenticationError
    if status == 400:
        # Gemini reports a rejected key as 400 INVALID_ARGUMENT.
        return AuthenticationError if "api key" in lowered else InvalidRequestError
    if status in (408, 504):
        return TimeoutError
    return ProviderError


def _class_for_message(lowered: str):
    if "429" in lowered or "rate limit" in lowered or "resource_exhausted" in lowered:
        return RateLimitError
    if "401" in lowered or "403" in lowered or "api key" in lowered:
        return AuthenticationError
    if "400" in lowered or "invalid" in lowered:
        return InvalidRequestError
    if "timeout" in lowered or "timed out" in lowered:
        return TimeoutError
    if "network" in lowered or "connection" in lowered:
        return NetworkError
    return ProviderError


def status_of(error: Exception):
    """HTTP status carried by an SDK exception, or None."""
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None
