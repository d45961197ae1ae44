from .client import AsyncDB, Credentials, DB, Table
from .errors import (
    ConfigurationError,
    DecodeError,
    InvalidEndpoint,
    ServiceError,
    SigningError,
    TinyDynamoError,
    TransportError,
    UnknownRegion,
)
from .region import Region, endpoint_for, id_for
from .transport import (
    AiohttpTransport,
    AsyncTransport,
    HTTPClientTransport,
    Request,
    StaticTransport,
    Transport,
)

__version__ = "0.1.0"

__all__ = [
    "AiohttpTransport",
    "AsyncDB",
    "AsyncTransport",
    "ConfigurationError",
    "Credentials",
    "DB",
    "DecodeError",
    "HTTPClientTransport",
    "InvalidEndpoint",
    "Region",
    "Request",
    "ServiceError",
    "SigningError",
    "StaticTransport",
    "Table",
    "TinyDynamoError",
    "Transport",
    "TransportError",
    "UnknownRegion",
    "endpoint_for",
    "id_for",
]
