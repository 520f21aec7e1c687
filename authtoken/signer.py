"""Token signing bound to a host-provided secret and default lifetime."""

from __future__ import annotations

from datetime import datetime, timedelta

from authtoken.config import TokenSettings, get_settings
from authtoken.tokens import ParsedToken, new_token, new_token_from_now, parse_token, token_login


class TokenSigner:
    """Issue and check auth tokens with one secret.

    The codec functions in :mod:`authtoken.tokens` take the secret on every
    call; this class holds it for hosts that keep a single process-wide key.
    """

    def __init__(self, secret: bytes | str, ttl: timedelta = timedelta(hours=1)) -> None:
        if not secret:
            raise ValueError("secret must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._secret = secret.encode("utf-8") if isinstance(secret, str) else secret
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: TokenSettings | None = None) -> TokenSigner:
        settings = settings or get_settings()
        return cls(settings.secret_bytes, settings.ttl)

    def issue(self, login: str, ttl: timedelta | None = None) -> str:
        return new_token_from_now(login, ttl if ttl is not None else self.ttl, self._secret)

    def issue_until(self, login: str, expires: datetime | int | float) -> str:
        return new_token(login, expires, self._secret)

    def parse(self, token: str) -> ParsedToken:
        return parse_token(token, self._secret)

    def login(self, token: str) -> str:
        """Return the login of a live token, or ``""``."""
        return token_login(token, self._secret)
