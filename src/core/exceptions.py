from typing import Optional

from fastapi import status

from src.core.schemas.response import ResponseCode


class ServiceError(Exception):
    """Base class for errors raised by the service layer"""

    code: ResponseCode = ResponseCode.SERVER_ERROR
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error!"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(ServiceError):
    code = ResponseCode.UNAUTHORIZED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthenticated!"


class UnauthorizedError(ServiceError):
    code = ResponseCode.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to do that!"


class ValidationError(ServiceError):
    code = ResponseCode.VALIDATION_ERROR
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input!"


class NotFoundError(ServiceError):
    code = ResponseCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found!"


class ConflictError(ServiceError):
    code = ResponseCode.CONFLICT
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict!"


class StoreError(ServiceError):
    """Persistence failure; transient from the caller's point of view"""
    code = ResponseCode.STORE_ERROR
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Db error!"


class TokenError(ServiceError):
    """Token could not be issued"""
    code = ResponseCode.TOKEN_ERROR
    default_message = "Couldn't issue token!"
