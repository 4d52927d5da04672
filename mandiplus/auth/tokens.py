"""
Access token decoding.

Tokens are decoded WITHOUT signature verification. The client only needs
the subject identifier to look the user up; the backend verifies every
request it receives.
"""

import time
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from mandiplus.auth.errors import MalformedToken

SUBJECT_CLAIMS = ("sub", "userId", "id")


def decode_claims(token: str) -> Dict[str, Any]:
    """
    Decode the token payload without verifying it.

    Raises:
        MalformedToken: If the payload cannot be decoded.
    """
    if not token:
        raise MalformedToken("Missing access token")

    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise MalformedToken() from exc

    if not isinstance(claims, dict):
        raise MalformedToken()

    return claims


def subject_from_claims(claims: Dict[str, Any]) -> str:
    """
    Extract the user identifier from decoded claims.

    Raises:
        MalformedToken: If none of the known subject claims is present.
    """
    for name in SUBJECT_CLAIMS:
        value = claims.get(name)
        if value not in (None, ""):
            return str(value)

    raise MalformedToken("Session token has no user identifier")


def subject_from_token(token: str) -> str:
    return subject_from_claims(decode_claims(token))


def is_expired(claims: Dict[str, Any], *, now: Optional[float] = None) -> bool:
    """True when an `exp` claim is present and in the past."""
    exp = claims.get("exp")
    if exp is None:
        return False
    try:
        return float(exp) <= (now if now is not None else time.time())
    except (TypeError, ValueError):
        return True
