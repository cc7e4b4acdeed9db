"""Error taxonomy shared by the auth gate, the stores and the routes.

Every error carries the HTTP status and the short error code that the
API returns as ``{"error": code}``. The handler in main.py renders them,
so no route ever builds an error body by hand.
"""


class AppError(Exception):
    """Base class for errors that map onto an API response."""

    status_code: int = 500
    code: str = "internal-error"

    def __init__(self, message: str = "", code: str | None = None):
        if code:
            self.code = code
        super().__init__(message or self.code)


# ─── 400 ────────────────────────────────────────────────


class ClientInputError(AppError):
    """Malformed or missing request fields."""

    status_code = 400
    code = "invalid-params"


# ─── 401 ────────────────────────────────────────────────


class AuthError(AppError):
    status_code = 401
    code = "unauthorized"


class MissingToken(AuthError):
    """No Authorization header, or it does not start with ``Bearer ``."""

    code = "missing-token"


class InvalidToken(AuthError):
    """Bad signature, wrong algorithm, malformed token or missing subject."""

    code = "invalid-token"


# ─── 500 ────────────────────────────────────────────────


class ServerConfigError(AppError):
    status_code = 500
    code = "server-config-error"


class ServerMisconfigured(ServerConfigError):
    """The JWT signing secret is not configured."""

    code = "server-misconfigured"


class PersistenceError(AppError):
    status_code = 500
    code = "store-failure"


class StoreFailure(PersistenceError):
    """A database read or write failed. Details stay in the logs."""
