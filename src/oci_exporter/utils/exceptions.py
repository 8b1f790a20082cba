class ExporterException(Exception):
    """Base class for all exporter errors."""


class ConfigError(ExporterException):
    """Tenancy or metric catalog is missing or malformed. Fatal at startup."""


class AuthError(ExporterException):
    """Credentials could not be loaded or the provider client could not be built. Fatal at startup."""


class RateLimitError(ExporterException):
    """The monitoring provider throttled the request (HTTP 429 / TooManyRequests)."""


class TransientQueryError(ExporterException):
    """A single query failed; the affected series keep their previous values."""

    def __init__(self, message: str, *, tenancy: str | None = None, namespace: str | None = None):
        super().__init__(message)
        self.tenancy = tenancy
        self.namespace = namespace
