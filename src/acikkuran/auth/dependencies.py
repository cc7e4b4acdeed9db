"""FastAPI auth dependency — the gate in front of every write.

Learn: Protected routes declare `identity: Identity = Depends(get_current_identity)`.
FastAPI resolves dependencies before the route body runs, so when this
raises, the handler never executes. The identity it returns is the only
source of "who is writing". Routes never read a user id from the body.
"""

from typing import Optional

import structlog
from fastapi import Header, Request

from acikkuran.auth.jwt import Identity, TokenVerifier
from acikkuran.errors import InvalidToken, MissingToken, ServerMisconfigured

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


def get_token_verifier(request: Request) -> TokenVerifier:
    """The verifier built at startup by create_app()."""
    verifier = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        raise ServerMisconfigured("Token verifier is not configured")
    return verifier


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Identity:
    """Extract and verify the bearer token (401/500 on failure)."""
    # Case-sensitive: "bearer x" is not a bearer token
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingToken()

    token = authorization[len(BEARER_PREFIX):]

    try:
        identity = get_token_verifier(request).verify(token)
    except ServerMisconfigured:
        logger.error("auth.server_misconfigured")
        raise
    except InvalidToken as e:
        logger.warning("auth.invalid_token", error=str(e))
        raise

    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=identity.id)
    return identity
