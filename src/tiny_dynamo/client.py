import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit

from multidict import CIMultiDict

from .codec import (
    build_read_body,
    build_write_body,
    parse_error_response,
    parse_read_response,
)
from .errors import ConfigurationError, InvalidEndpoint, TinyDynamoError, TransportError
from .region import Region
from .signer import Signer
from .transport import AsyncTransport, Request, Transport

logger = logging.getLogger("tiny_dynamo")
logger.addHandler(logging.NullHandler())

CONTENT_TYPE: str = "application/x-amz-json-1.0"
PUT_ITEM_TARGET: str = "DynamoDB_20120810.PutItem"
GET_ITEM_TARGET: str = "DynamoDB_20120810.GetItem"


@dataclass(frozen=True)
class Credentials:
    """A set of AWS credentials used to sign requests."""

    access_key_id: str
    secret_access_key: str = field(repr=False)


@dataclass(frozen=True)
class Table:
    """
    The DynamoDB table holding the key/value pairs.

    :param table_name: Name of the table.
    :type table_name: str
    :param key_name: Name of the (string) partition key attribute.
    :type key_name: str
    :param value_name: Name of the attribute holding values.
    :type value_name: str
    :param region: AWS region.
    :type region: Region
    :param endpoint: Custom endpoint (e.g. ``"http://localhost:8000"``),
        used instead of the regional one. Requests always go to ``/``, so the
        endpoint may not carry a path, query or fragment.
    :type endpoint: Optional[str]
    :raises ConfigurationError: If the region, endpoint or attribute names
        are unusable.
    """

    table_name: str
    key_name: str
    value_name: str
    region: Region
    endpoint: Optional[str] = None

    @classmethod
    def from_region(
        cls,
        table_name: str,
        key_name: str,
        value_name: str,
        region: Union[Region, str],
        endpoint: Optional[str] = None,
    ) -> "Table":
        """
        Build a table from a ``Region`` or a region identifier such as
        ``"us-east-1"``.

        :raises UnknownRegion: If ``region`` names no known region.
        """
        if not isinstance(region, Region):
            region = Region.parse(region)
        return cls(table_name, key_name, value_name, region, endpoint)

    def __post_init__(self):
        if not isinstance(self.region, Region):
            raise ConfigurationError(
                f"Expected a Region, got {self.region!r} (see Table.from_region)"
            )

        if self.endpoint is not None:
            parsed = urlsplit(self.endpoint)
            if parsed.scheme not in ("http", "https"):
                raise InvalidEndpoint(self.endpoint, "scheme must be http or https")
            if not parsed.netloc:
                raise InvalidEndpoint(self.endpoint, "missing host")
            # The signature always covers path / and an empty query string
            if parsed.path not in ("", "/"):
                raise InvalidEndpoint(self.endpoint, "path must be empty or /")
            if parsed.query or parsed.fragment:
                raise InvalidEndpoint(
                    self.endpoint, "query string and fragment are not allowed"
                )

        if self.key_name == self.value_name:
            raise ConfigurationError(
                f"Key and value attributes must differ (both {self.key_name!r})"
            )

    @property
    def endpoint_url(self) -> str:
        return self.endpoint or self.region.endpoint_url

    @property
    def host(self) -> str:
        return urlsplit(self.endpoint_url).netloc


class BaseDB:
    """Request construction and response handling shared by both clients."""

    def __init__(self, credentials: Credentials, table: Table):
        self.credentials = credentials
        self.table = table
        self.signer = Signer(
            credentials.access_key_id,
            credentials.secret_access_key,
            table.region.id,
        )

    def _signed_request(self, target: str, body: bytes) -> Request:
        headers: "CIMultiDict[str]" = CIMultiDict()
        headers.add("Host", self.table.host)
        headers.add("Content-Type", CONTENT_TYPE)
        headers.add("X-Amz-Target", target)
        request = Request("POST", self.table.endpoint_url, headers, body)
        logger.debug(f"Built {target} request for table {self.table.table_name}")
        return self.signer.sign(request)

    def put_item_request(self, key: str, value: str) -> Request:
        table = self.table
        body = build_write_body(
            table.table_name, table.key_name, table.value_name, key, value
        )
        return self._signed_request(PUT_ITEM_TARGET, body)

    def get_item_request(self, key: str) -> Request:
        table = self.table
        body = build_read_body(table.table_name, table.key_name, table.value_name, key)
        return self._signed_request(GET_ITEM_TARGET, body)

    def _raise_for_status(self, status: int, body: str) -> None:
        if status == 200:
            return
        error = parse_error_response(body, status)
        logger.warning(f"DynamoDB error {status}: {error}")
        raise error

    def _set_result(self, response: Tuple[int, str]) -> None:
        self._raise_for_status(*response)

    def _get_result(self, response: Tuple[int, str]) -> Optional[str]:
        status, body = response
        self._raise_for_status(status, body)
        return parse_read_response(body, self.table.value_name)


class DB(BaseDB):
    """
    Blocking key/value client over a single DynamoDB table.

    Each call sends exactly one request through ``transport``; nothing is
    cached or retried.

    :param credentials: Credentials used to sign requests.
    :type credentials: Credentials
    :param table: Table configuration.
    :type table: Table
    :param transport: Sends signed requests.
    :type transport: Transport
    """

    def __init__(self, credentials: Credentials, table: Table, transport: Transport):
        super().__init__(credentials, table)
        self.transport = transport

    def _send(self, request: Request) -> Tuple[int, str]:
        try:
            return self.transport.send(request)
        except TinyDynamoError:
            raise
        except Exception as err:
            raise TransportError(err) from err

    def set(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        :raises ServiceError: If DynamoDB rejects the request.
        :raises DecodeError: If the error response cannot be decoded.
        :raises TransportError: If the transport fails.
        """
        self._set_result(self._send(self.put_item_request(key, value)))

    def get(self, key: str) -> Optional[str]:
        """
        Return the value stored under ``key``, or ``None`` if there is none.

        :raises ServiceError: If DynamoDB rejects the request.
        :raises DecodeError: If the response cannot be decoded.
        :raises TransportError: If the transport fails.
        """
        return self._get_result(self._send(self.get_item_request(key)))


class AsyncDB(BaseDB):
    """
    Async variant of ``DB`` for transports such as ``AiohttpTransport``.

    Signing is done inline; only the transport call is awaited.
    """

    def __init__(
        self, credentials: Credentials, table: Table, transport: AsyncTransport
    ):
        super().__init__(credentials, table)
        self.transport = transport

    async def _send(self, request: Request) -> Tuple[int, str]:
        try:
            return await self.transport.send(request)
        except TinyDynamoError:
            raise
        except Exception as err:
            raise TransportError(err) from err

    async def set(self, key: str, value: str) -> None:
        self._set_result(await self._send(self.put_item_request(key, value)))

    async def get(self, key: str) -> Optional[str]:
        return self._get_result(await self._send(self.get_item_request(key)))
