"""Signed auth tokens carrying a login and an expiration time.

Uses HMAC-SHA256 signing with Python stdlib. No external dependencies.

Binary layout before encoding::

    expires (4 bytes, big-endian Unix seconds) | login | signature (32 bytes)

The result is URL-safe base64 with padding.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import math
import re
import struct
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

logger = logging.getLogger(__name__)

SIGNATURE_SIZE = 32
DECODED_MIN_LENGTH = 4 + 1 + SIGNATURE_SIZE
DECODED_MAX_LENGTH = 1024

_TOKEN_PATTERN = re.compile(r"\A[A-Za-z0-9_-]*={0,2}\Z")
_EXPIRES = struct.Struct(">I")


class TokenError(str, Enum):
    """Reasons a token fails to parse."""

    MALFORMED = "malformed token"
    WRONG_SIGNATURE = "wrong token signature"


@dataclass(frozen=True)
class ParsedToken:
    """Outcome of :func:`parse_token`.

    ``error`` is ``None`` on success, in which case ``login`` and ``expires``
    are populated.
    """

    login: str = ""
    expires: datetime | None = None
    error: TokenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_bytes(secret: bytes | str) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return secret


def _unix_seconds(expires: datetime | int | float) -> int:
    if isinstance(expires, datetime):
        expires = expires.timestamp()
    return math.floor(expires)


def get_signature(data: bytes, secret: bytes | str) -> bytes:
    """Sign ``data`` with a key derived from ``secret`` and ``data`` itself."""
    key = hmac.new(_as_bytes(secret), data, hashlib.sha256).digest()
    return hmac.new(key, data, hashlib.sha256).digest()


def new_token(login: str, expires: datetime | int | float, secret: bytes | str) -> str:
    """Create a signed token for ``login`` valid until ``expires``.

    Args:
        login: Identity to embed. An empty login yields an empty token.
        expires: Expiration as a datetime or Unix seconds. Fractions are
            dropped and the value is stored as an unsigned 32-bit integer.
        secret: HMAC signing secret.

    Returns:
        URL-safe base64 string, or ``""`` for an empty login.
    """
    if not login:
        return ""

    data = _EXPIRES.pack(_unix_seconds(expires) & 0xFFFFFFFF)
    data += login.encode("utf-8", "surrogateescape")
    return base64.urlsafe_b64encode(data + get_signature(data, secret)).decode("ascii")


def new_token_from_now(login: str, ttl: timedelta | int | float, secret: bytes | str) -> str:
    """Create a signed token for ``login`` expiring ``ttl`` from now."""
    if isinstance(ttl, timedelta):
        ttl = ttl.total_seconds()
    return new_token(login, time.time() + ttl, secret)


def _reject(error: TokenError) -> ParsedToken:
    logger.debug("Rejected auth token: %s", error.value)
    return ParsedToken(error=error)


def parse_token(token: str, secret: bytes | str) -> ParsedToken:
    """Verify a token and extract its login and expiration.

    Expiration is not checked here; use :func:`token_login` for that.

    Returns:
        A :class:`ParsedToken`. Its ``error`` is ``TokenError.MALFORMED`` when
        the text is not a token at all and ``TokenError.WRONG_SIGNATURE`` when
        the signature does not match ``secret``.
    """
    estimated = len(token) // 4 * 3
    if estimated < DECODED_MIN_LENGTH or estimated > DECODED_MAX_LENGTH:
        return _reject(TokenError.MALFORMED)

    if len(token) % 4 or not _TOKEN_PATTERN.match(token):
        return _reject(TokenError.MALFORMED)
    try:
        raw = base64.urlsafe_b64decode(token)
    except (binascii.Error, ValueError):
        return _reject(TokenError.MALFORMED)

    if len(raw) < DECODED_MIN_LENGTH:
        return _reject(TokenError.MALFORMED)

    data, signature = raw[:-SIGNATURE_SIZE], raw[-SIGNATURE_SIZE:]
    if not hmac.compare_digest(get_signature(data, secret), signature):
        return _reject(TokenError.WRONG_SIGNATURE)

    (seconds,) = _EXPIRES.unpack_from(data)
    return ParsedToken(
        login=data[_EXPIRES.size:].decode("utf-8", "surrogateescape"),
        expires=datetime.fromtimestamp(seconds, tz=timezone.utc),
    )


def token_login(token: str, secret: bytes | str) -> str:
    """Return the login of a valid, unexpired token.

    Returns:
        The login, or ``""`` if the token is malformed, forged, or expired.
    """
    parsed = parse_token(token, secret)
    if not parsed.ok or parsed.expires.timestamp() < time.time():
        return ""
    return parsed.login
