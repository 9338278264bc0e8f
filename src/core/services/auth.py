from typing import Dict, Any, Optional
import logging

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import (
    ConflictError, NotFoundError, StoreError, UnauthenticatedError, ValidationError
)
from src.core.auth import Identity
from src.core.models.user import User
from src.core.services.account import AccountDirectory
from src.core.services.token import TokenService
from src.core.utils.validation import (
    validate_email, validate_login, validate_non_empty, validate_password,
    validate_repeated_password, validate_user
)

logger = logging.getLogger(__name__)


def hash_credential(secret: str) -> str:
    """bcrypt hash of a password"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(secret.encode(), salt).decode()


def verify_credential(credential_hash: str, secret: str) -> bool:
    try:
        return bcrypt.checkpw(secret.encode(), credential_hash.encode())
    except ValueError:
        # not a bcrypt hash
        return False


class AuthService:
    def __init__(self, session: AsyncSession, token_service: TokenService):
        self.session = session
        self.token_service = token_service
        self.accounts = AccountDirectory(session)

    async def register(
        self,
        screen_name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        password_repeat: Optional[str]
    ) -> Dict[str, Any]:
        """Create an account and sign the new user in"""
        errors = validate_user(screen_name, email, password, password_repeat)
        if errors:
            raise ValidationError(" ".join(errors))

        if await self.accounts.get_by_screen_name(screen_name):
            raise ConflictError("Username must be unique!")
        if await self.accounts.get_by_email(email):
            raise ConflictError("Email must be unique!")

        user = User(
            screen_name=screen_name,
            email=email,
            password=hash_credential(password)
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # lost a race against a registration with the same name or email
            await self.session.rollback()
            raise ConflictError("Username and email must be unique!") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Registration failed - screen_name: {screen_name}, error: {str(e)}")
            raise StoreError("Couldn't add to db!") from e

        token, ttl = self.token_service.issue_token(screen_name)
        logger.info(f"User registered - id: {user.id}, screen_name: {screen_name}")
        return {
            "user": {"id": user.id, "screen_name": user.screen_name, "email": user.email},
            "token": token,
            "ttl": ttl
        }

    async def login(
        self,
        screen_name: Optional[str],
        password: Optional[str],
        remember: bool = False
    ) -> Dict[str, Any]:
        """Check the credentials and issue a session token"""
        errors = validate_login(screen_name, password)
        if errors:
            raise ValidationError(" ".join(errors))

        user = await self.accounts.get_by_screen_name(screen_name)
        if user is None:
            raise NotFoundError("No such user!")
        if not verify_credential(user.password, password):
            logger.warning(f"Wrong password - screen_name: {screen_name}")
            raise UnauthenticatedError("Wrong password!")

        token, ttl = self.token_service.issue_token(user.screen_name, remember=remember)
        logger.info(f"User logged in - id: {user.id}, remember: {remember}")
        return {
            "user": {"id": user.id, "screen_name": user.screen_name, "email": user.email},
            "token": token,
            "ttl": ttl,
            "remember": remember
        }

    async def _current_user(self, identity: Identity, password: Optional[str]) -> User:
        """Account behind identity, re-checked against its current password"""
        if identity is None or not identity.is_authenticated:
            raise UnauthenticatedError()
        user = await self.accounts.get_by_screen_name(identity.screen_name)
        if user is None:
            raise UnauthenticatedError()
        if not verify_credential(user.password, password):
            logger.warning(f"Wrong password - screen_name: {identity.screen_name}")
            raise UnauthenticatedError("Wrong password!")
        return user

    async def _save(self, user: User, action: str) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Email must be unique!") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"{action} failed - id: {user.id}, error: {str(e)}")
            raise StoreError("Couldn't update user!") from e

    async def update_email(
        self,
        identity: Identity,
        email: Optional[str],
        password: Optional[str]
    ) -> Dict[str, Any]:
        """Change the caller's email; the current password is required"""
        if identity is None or not identity.is_authenticated:
            raise UnauthenticatedError()
        errors = validate_email(email)
        if not validate_non_empty(password):
            errors.append("Password cannot be empty!")
        if errors:
            raise ValidationError(" ".join(errors))

        user = await self._current_user(identity, password)
        if user.email != email:
            if await self.accounts.get_by_email(email):
                raise ConflictError("Email must be unique!")
            user.email = email
            await self._save(user, "Email change")
            logger.info(f"Email changed - id: {user.id}")

        return {"id": user.id, "screen_name": user.screen_name, "email": user.email}

    async def update_password(
        self,
        identity: Identity,
        password: Optional[str],
        new_password: Optional[str],
        new_password_repeat: Optional[str]
    ) -> Dict[str, Any]:
        """Replace the caller's password hash; existing tokens stay valid"""
        if identity is None or not identity.is_authenticated:
            raise UnauthenticatedError()
        errors = []
        if not validate_non_empty(password):
            errors.append("Current password cannot be empty!")
        errors.extend(validate_password(new_password))
        errors.extend(validate_repeated_password(new_password, new_password_repeat))
        if errors:
            raise ValidationError(" ".join(errors))

        user = await self._current_user(identity, password)
        user.password = hash_credential(new_password)
        await self._save(user, "Password change")
        logger.info(f"Password changed - id: {user.id}")

        return {"id": user.id, "screen_name": user.screen_name, "email": user.email}
