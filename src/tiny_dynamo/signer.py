"""
AWS Signature Version 4 for DynamoDB requests.

https://docs.aws.amazon.com/IAM/latest/UserGuide/reference_sigv-create-signed-request.html
"""

import datetime
import hashlib
import hmac
import logging
import re
from typing import Iterable, Tuple

from .errors import SigningError
from .region import SERVICE
from .transport import Request

logger = logging.getLogger("tiny_dynamo")

ALGORITHM: str = "AWS4-HMAC-SHA256"
TERMINATOR: str = "aws4_request"

SHORT_DATE: str = "%Y%m%d"
LONG_DATETIME: str = "%Y%m%dT%H%M%SZ"

_ILLEGAL_HEADER_CHARS = frozenset("\r\n\0")
# RFC 9110 token
_HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def sign(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def get_signature_key(
    secret_key: str, date_stamp: str, region: str, service: str = SERVICE
) -> bytes:
    """
    Derive the signing key for one day, region and service.

    ``date_stamp`` must be formatted as ``YYYYMMDD``.

    :raises SigningError: If ``secret_key`` cannot be used as key material.
    """
    try:
        k_secret = f"AWS4{secret_key}".encode("utf-8")
    except UnicodeEncodeError as err:
        raise SigningError(f"Secret key is not valid key material: {err}") from err

    k_date = sign(k_secret, date_stamp)
    k_region = sign(k_date, region)
    k_service = sign(k_region, service)
    k_signing = sign(k_service, TERMINATOR)
    return k_signing


def credential_scope(date_stamp: str, region: str, service: str = SERVICE) -> str:
    return "/".join([date_stamp, region, service, TERMINATOR])


def canonical_header_lines(headers: Iterable[Tuple[str, str]]) -> str:
    """
    One ``name:value`` line per header occurrence, names lowercased and
    values trimmed, sorted by the full line.
    """
    lines = sorted(f"{name.lower()}:{value.strip()}" for name, value in headers)
    return "\n".join(lines)


def signed_header_names(names: Iterable[str]) -> str:
    return ";".join(sorted({name.lower() for name in names}))


def canonical_request(
    method: str, headers: Iterable[Tuple[str, str]], body_digest: str
) -> str:
    # Every DynamoDB call is a request to / with no query string, so neither
    # is derived from the request.
    headers = list(headers)
    return "\n".join(
        [
            method,
            "/",
            "",
            canonical_header_lines(headers) + "\n",
            signed_header_names(name for name, _ in headers),
            body_digest,
        ]
    )


def string_to_sign(amz_date: str, scope: str, canonical: str) -> str:
    return "\n".join(
        [
            ALGORITHM,
            amz_date,
            scope,
            hashlib.sha256(canonical.encode("utf-8")).hexdigest(),
        ]
    )


def authorization_header(
    access_key: str, scope: str, signed_headers: str, signature: str
) -> str:
    return (
        f"{ALGORITHM} Credential={access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


def check_header(name: str, value: str) -> None:
    """
    :raises SigningError: If the header cannot be sent as-is.
    """
    if not _HEADER_NAME.fullmatch(name):
        raise SigningError(f"Header name {name!r} is not a valid HTTP token")
    if _ILLEGAL_HEADER_CHARS.intersection(value):
        raise SigningError(f"Header {name!r} contains a control character")
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        raise SigningError(f"Header {name!r} is not latin-1 encodable") from None


class Signer:
    """
    Signs requests in place for one set of credentials and one region.

    A request may only be signed once: the timestamp differs between calls,
    so signing it again would not produce the same headers.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        region: str,
        service: str = SERVICE,
    ):
        self.access_key = access_key
        self._secret_key = secret_key
        self.region = region
        self.service = service

    def __repr__(self) -> str:
        return (
            f"Signer(access_key={self.access_key!r}, region={self.region!r}, "
            f"service={self.service!r})"
        )

    def sign(self, request: Request) -> Request:
        """
        Append ``X-Amz-Date``, ``Authorization``, ``Content-Length`` and
        ``X-Amz-Content-Sha256`` headers to ``request``.

        Headers already on the request are left untouched and signed.

        :raises SigningError: If the request is already signed, or a header
            value cannot be sent.
        """
        headers = request.headers
        if "Authorization" in headers:
            raise SigningError("Request is already signed")
        for name, value in headers.items():
            check_header(name, value)

        body_digest = hashlib.sha256(request.body).hexdigest()

        now = datetime.datetime.now(datetime.timezone.utc)
        amz_date = now.strftime(LONG_DATETIME)
        date_stamp = now.strftime(SHORT_DATE)
        headers.add("X-Amz-Date", amz_date)

        canonical = canonical_request(request.method, headers.items(), body_digest)
        signed_headers = signed_header_names(headers.keys())

        scope = credential_scope(date_stamp, self.region, self.service)
        signing_key = get_signature_key(
            self._secret_key, date_stamp, self.region, self.service
        )
        signature = hmac.new(
            signing_key,
            string_to_sign(amz_date, scope, canonical).encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

        added = [
            (
                "Authorization",
                authorization_header(self.access_key, scope, signed_headers, signature),
            ),
            ("Content-Length", str(len(request.body))),
            ("X-Amz-Content-Sha256", body_digest),
        ]
        for name, value in added:
            check_header(name, value)
        for name, value in added:
            headers.add(name, value)

        logger.debug(f"Signed {request.method} {request.uri} ({signed_headers})")
        return request
