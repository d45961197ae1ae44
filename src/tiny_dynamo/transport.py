import asyncio
import http.client
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Protocol, Tuple
from urllib.parse import urlsplit

import aiohttp
from multidict import CIMultiDict

logger = logging.getLogger("tiny_dynamo")


@dataclass
class Request:
    """
    An HTTP request addressed to DynamoDB.

    Header names are case-insensitive and a name may occur more than once.
    """

    method: str
    uri: str
    headers: "CIMultiDict[str]" = field(default_factory=CIMultiDict)
    body: bytes = b""


class Transport(Protocol):
    """Sends a signed request and returns ``(status, body)``."""

    def send(self, request: Request) -> Tuple[int, str]: ...


class AsyncTransport(Protocol):
    async def send(self, request: Request) -> Tuple[int, str]: ...


class StaticTransport:
    """
    Transport that never touches the network and always returns the same
    response. The last request passed to ``send`` is kept in ``last_request``.
    """

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        self.last_request: Optional[Request] = None

    def send(self, request: Request) -> Tuple[int, str]:
        self.last_request = request
        return self.status, self.body


class HTTPClientTransport:
    """
    Blocking transport built on ``http.client``.

    A new connection is opened for every request.

    :param timeout: Socket timeout in seconds.
    :type timeout: float
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def send(self, request: Request) -> Tuple[int, str]:
        parsed = urlsplit(request.uri)
        if parsed.scheme == "https":
            conn_cls = http.client.HTTPSConnection
        else:
            conn_cls = http.client.HTTPConnection

        conn: Optional[http.client.HTTPConnection] = None
        try:
            conn = conn_cls(parsed.netloc, timeout=self.timeout)
            conn.putrequest(
                request.method,
                parsed.path or "/",
                skip_host=True,
                skip_accept_encoding=True,
            )
            for name, value in request.headers.items():
                conn.putheader(name, value)
            conn.endheaders(request.body)
            response = conn.getresponse()
            # Undecodable bytes surface as a DecodeError from the codec
            body = response.read().decode(errors="replace")
            logger.debug(f"{request.method} {request.uri} -> {response.status}")
            return response.status, body

        finally:
            if conn is not None:
                conn.close()


class AiohttpTransport:
    """
    Async transport built on aiohttp.

    :param client_factory: Factory coroutine creating the ``ClientSession``.
        A default session is created when omitted.
    :type client_factory: Optional[Callable[[], Awaitable[aiohttp.ClientSession]]]
    """

    def __init__(
        self,
        client_factory: Optional[Callable[[], Awaitable[aiohttp.ClientSession]]] = None,
    ):
        self.client_factory = client_factory
        self.client: Optional[aiohttp.ClientSession] = None
        self.client_factory_lock = asyncio.Lock()

    async def _get_client(self) -> aiohttp.ClientSession:
        if self.client is None:
            async with self.client_factory_lock:
                if self.client is None:
                    if self.client_factory:
                        logger.debug("User defined client_factory")
                        self.client = await self.client_factory()
                    else:
                        logger.debug("Setting up client")
                        self.client = aiohttp.ClientSession()
        return self.client

    async def send(self, request: Request) -> Tuple[int, str]:
        client = await self._get_client()
        async with client.request(
            request.method,
            request.uri,
            data=request.body,
            headers=request.headers,
        ) as response:
            body = await response.text(errors="replace")
            logger.debug(f"{request.method} {request.uri} -> {response.status}")
            return response.status, body

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
            self.client = None

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
