"""Static bearer token authentication."""
import logging
import secrets
from collections.abc import Callable, Sequence

from fastapi import Depends
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme; missing credentials are handled below, not by FastAPI
security = HTTPBearer(auto_error=False)

WWW_AUTHENTICATE_CHALLENGE = "Bearer realm='sign', error=\"invalid_request\""


class AuthenticationError(Exception):
    """
    Raised when the bearer token is missing or wrong.

    Rendered as a 400 with a WWW-Authenticate challenge and a plain
    "Unauthorized" body.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


def unauthorized_response() -> PlainTextResponse:
    """Build the response sent for a failed bearer check."""
    return PlainTextResponse(
        "Unauthorized",
        status_code=400,
        headers={"WWW-Authenticate": WWW_AUTHENTICATE_CHALLENGE},
    )


def check_token(token: str | None, expected: str) -> None:
    """
    Compare a presented token with the configured one in constant time.

    Raises:
        AuthenticationError: If the token is missing or does not match.
    """
    if not token:
        raise AuthenticationError("missing bearer token")
    if not secrets.compare_digest(token.encode(), expected.encode()):
        logger.warning("Rejected request with invalid bearer token")
        raise AuthenticationError("invalid bearer token")


async def verify_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request unless it carries the configured bearer token."""
    check_token(credentials.credentials if credentials else None, settings.bearer_token)


class BearerAuthMiddleware:
    """
    ASGI middleware that guards path prefixes with the bearer token.

    Runs before routing, so an unauthenticated request is answered with the
    auth error even when its body could not be decoded.
    """

    def __init__(
        self,
        app: ASGIApp,
        protected_prefixes: Sequence[str],
        settings_getter: Callable[[], Settings] = get_settings,
    ) -> None:
        self.app = app
        self.protected_prefixes = tuple(protected_prefixes)
        self.settings_getter = settings_getter

    def is_protected(self, path: str) -> bool:
        """Whether the path equals or sits under a protected prefix."""
        return any(
            path == prefix or path.startswith(prefix + "/")
            for prefix in self.protected_prefixes
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:  # noqa: D102
        if scope["type"] != "http" or not self.is_protected(scope["path"]):
            await self.app(scope, receive, send)
            return

        scheme, token = get_authorization_scheme_param(
            Headers(scope=scope).get("authorization"),
        )
        try:
            check_token(
                token if scheme.lower() == "bearer" else None,
                self.settings_getter().bearer_token,
            )
        except AuthenticationError as exc:
            logger.info("Unauthorized request: %s", exc.reason)
            await unauthorized_response()(scope, receive, send)
            return

        await self.app(scope, receive, send)
