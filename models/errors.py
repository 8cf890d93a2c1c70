"""Exception types raised by the investigation pipeline."""


class InvestigatorError(Exception):
    """Base class for all investigator errors."""


class ValidationError(InvestigatorError):
    """Raised when a subject name is empty after trimming."""


class ProviderError(InvestigatorError):
    """
    Single failure channel for the grounded-generation provider.

    Covers authentication, network, quota, malformed-request, timeout,
    missing-credential and provider-internal failures.

    Attributes:
        message: Provider message when one was supplied, else a generic description
        code: Normalized error code (timeout, auth, rate_limit, bad_request,
            provider_error, config, unknown)
        retryable: Whether resubmitting the same request may succeed
    """

    def __init__(self, message: str, code: str = "unknown", retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable
