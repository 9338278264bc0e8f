from typing import TypeVar, Generic
from pydantic import BaseModel, Field
from enum import Enum

class ResponseCode(str, Enum):
    """Response codes"""
    SUCCESS = "SUCCESS"
    CREATE_SUCCESS = "CREATE_SUCCESS"
    UPDATE_SUCCESS = "UPDATE_SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"
    SERVER_ERROR = "SERVER_ERROR"
    STORE_ERROR = "STORE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TOKEN_ERROR = "TOKEN_ERROR"

T = TypeVar('T')

class BaseResponse(BaseModel):
    """Common response envelope"""
    success: bool = Field(..., description="Whether the call succeeded")
    code: str = Field(..., description="Response code")
    message: str = Field(..., description="Human readable message")

class SuccessResponse(BaseResponse, Generic[T]):
    """Successful response"""
    data: T = Field(..., description="Payload")

    @classmethod
    def create(cls, code: str, message: str, data: T) -> "SuccessResponse[T]":
        return cls(
            success=True,
            code=code,
            message=message,
            data=data
        )
