from pydantic import BaseModel, Field
from typing import Dict, Any
from .response import SuccessResponse

class AuthUser(BaseModel):
    id: int
    screen_name: str
    email: str

class AuthToken(BaseModel):
    user: AuthUser
    token: str
    ttl: int = Field(..., description="Token lifetime in seconds")

AuthSuccessResponse = SuccessResponse[AuthToken]
AuthSimpleSuccessResponse = SuccessResponse[Dict[str, Any]]
AuthUserSuccessResponse = SuccessResponse[AuthUser]
