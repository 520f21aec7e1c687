"""Stateless signed auth tokens carrying a login and an expiration time."""

from authtoken.signer import TokenSigner
from authtoken.tokens import (
    DECODED_MAX_LENGTH,
    DECODED_MIN_LENGTH,
    SIGNATURE_SIZE,
    ParsedToken,
    TokenError,
    get_signature,
    new_token,
    new_token_from_now,
    parse_token,
    token_login,
)

__all__ = [
    "DECODED_MAX_LENGTH",
    "DECODED_MIN_LENGTH",
    "SIGNATURE_SIZE",
    "ParsedToken",
    "TokenError",
    "TokenSigner",
    "get_signature",
    "new_token",
    "new_token_from_now",
    "parse_token",
    "token_login",
]
