"""
Error taxonomy for the payment relay.

Validation and persistence errors stop a request before the provider is
contacted. Provider failures are returned as data by the provider clients;
ProviderError only travels inside a client.
"""


class RelayError(Exception):
    """Base class for all relay errors."""


class ConfigurationError(RelayError):
    """Required configuration (e.g. the store URL) is missing or unusable."""


class ValidationError(RelayError):
    """User-correctable input problem. Mapped to HTTP 400."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class PersistenceError(RelayError):
    """The store rejected or could not accept the pending transaction."""


class ProviderError(RelayError):
    """The payment provider was unreachable or rejected the request."""

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ReconciliationWriteError(RelayError):
    """Writing the provider outcome back to the stored row failed."""
