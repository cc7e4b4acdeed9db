"""JWT verification for tokens issued by the NextAuth.js frontend.

Learn: The frontend signs a JWT with HS256 and the shared NEXTAUTH_SECRET.
We only verify here; token issuance lives on the frontend. The trusted
part of the token is the standard `sub` claim (the user id). `email` and
`name` are carried through for display and logging, never for authorization.
"""

from dataclasses import dataclass
from typing import Optional

import jwt

from acikkuran.errors import InvalidToken, ServerMisconfigured

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """The verified caller for one request. Never persisted."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None


def verify_token(token: str, secret: Optional[str]) -> Identity:
    """Verify a token and return the identity it proves.

    Raises ServerMisconfigured if no secret is configured (checked before
    any crypto), InvalidToken for everything wrong with the token itself.
    """
    if not secret:
        raise ServerMisconfigured("JWT secret is not configured")

    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError as e:
        raise InvalidToken(f"Invalid token: {e}")

    sub = payload.get("sub")
    if not sub:
        raise InvalidToken("Token has no subject")

    return Identity(
        id=str(sub),
        email=payload.get("email"),
        name=payload.get("name"),
    )


class TokenVerifier:
    """Holds the signing secret, checked once when the app is built."""

    def __init__(self, secret: Optional[str]):
        if not secret:
            raise ServerMisconfigured(
                "ACIKKURAN_JWT_SECRET (or NEXTAUTH_SECRET) must be set"
            )
        self._secret = secret

    def verify(self, token: str) -> Identity:
        return verify_token(token, self._secret)
