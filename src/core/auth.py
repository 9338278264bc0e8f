from dataclasses import dataclass
from typing import Mapping, Optional
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import settings
from src.core.exceptions import TokenError
from src.core.services.token import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Who is making the current request. Rebuilt from the cookie on every request."""
    screen_name: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.screen_name is not None

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls()


_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Process wide token service, built from settings on first use"""
    global _token_service
    if _token_service is None:
        _token_service = TokenService.from_settings()
    return _token_service


def resolve_identity(cookies: Mapping[str, str], token_service: TokenService) -> Identity:
    """Read the Token cookie and turn it into an Identity. Never raises."""
    token = cookies.get(settings.TOKEN_COOKIE_NAME)
    if not token:
        return Identity.anonymous()

    subject = token_service.verify_token(token)
    if subject is None:
        logger.debug("Ignoring invalid or expired session token")
        return Identity.anonymous()
    return Identity(screen_name=subject)


class IdentityMiddleware(BaseHTTPMiddleware):
    """Attach request.state.identity to every request"""

    def __init__(self, app, token_service: Optional[TokenService] = None):
        super().__init__(app)
        self.token_service = token_service

    async def dispatch(self, request: Request, call_next):
        try:
            token_service = self.token_service or get_token_service()
        except TokenError as e:
            # normally caught at startup; requests still go through as anonymous
            logger.error(f"Token service unavailable: {e.message}")
            request.state.identity = Identity.anonymous()
        else:
            request.state.identity = resolve_identity(request.cookies, token_service)
        return await call_next(request)


def get_identity(request: Request) -> Identity:
    """Identity of the caller; anonymous when there is no valid session"""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        return Identity.anonymous()
    return identity
