from typing import Optional


class TinyDynamoError(Exception):
    pass


class ConfigurationError(TinyDynamoError):
    """Invalid client configuration, detected when the client is built."""


class UnknownRegion(ConfigurationError):
    def __init__(self, region: str):
        self.region = region
        super().__init__(f"Unknown region: {region!r}")


class InvalidEndpoint(ConfigurationError):
    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Invalid endpoint {endpoint!r}: {reason}")


class SigningError(TinyDynamoError):
    """The request could not be signed (bad key material or header value)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class TransportError(TinyDynamoError):
    """
    Failure reported by the transport.

    The original exception is available as ``error`` and as ``__cause__``.
    """

    def __init__(self, error: BaseException):
        self.error = error
        super().__init__(f"Transport failed: {error!r}")


class DecodeError(TinyDynamoError):
    """The service replied with a body of an unexpected shape."""

    def __init__(self, body: str, reason: str):
        self.body = body
        self.reason = reason
        super().__init__(f"Unexpected response body: {reason}")


class ServiceError(TinyDynamoError):
    """DynamoDB rejected the request with a structured error."""

    def __init__(self, error_type: str, message: str, status: Optional[int] = None):
        self.error_type = error_type
        self.message = message
        self.status = status
        super().__init__(f"{error_type}: {message}")
