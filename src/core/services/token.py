from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import logging

from jose import jwt, JWTError

from config.settings import settings
from src.core.exceptions import TokenError

logger = logging.getLogger(__name__)

class TokenService:
    """Issues and verifies the signed session token carried in the Token cookie"""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60
    ):
        if not secret_key:
            raise TokenError("Token signing key is not configured!")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls) -> "TokenService":
        return cls(
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    @property
    def ttl_seconds(self) -> int:
        return self.expire_minutes * 60

    def issue_token(
        self,
        subject: str,
        remember: bool = False,
        issued_at: Optional[datetime] = None
    ) -> Tuple[str, int]:
        """Sign a token for subject.

        The expiry is the same whether or not ``remember`` is set; the flag only
        tells the caller how to persist the cookie.

        Returns:
            (token, ttl in seconds)
        """
        if not subject:
            raise TokenError("Token subject cannot be empty!")

        now = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + timedelta(seconds=self.ttl_seconds)
        }
        try:
            token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except JWTError as e:
            logger.error(f"Signing token failed - subject: {subject}, error: {str(e)}")
            raise TokenError() from e

        logger.debug(f"Token issued - subject: {subject}, remember: {remember}")
        return token, self.ttl_seconds

    def verify_token(self, token: str) -> Optional[str]:
        """Return the token subject, or None for a forged, malformed or expired token"""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Token rejected: {str(e)}")
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return subject
