from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Form, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.core.auth import Identity, get_identity, get_token_service
from src.core.database import get_session
from src.core.exceptions import ServiceError
from src.core.schemas.auth import (
    AuthSuccessResponse, AuthSimpleSuccessResponse, AuthToken, AuthUser, AuthUserSuccessResponse
)
from src.core.schemas.response import ResponseCode
from src.core.services.auth import AuthService
from src.core.services.token import TokenService
from src.core.utils.logger import APILogger

router = APIRouter()

def _set_token_cookie(response: Response, token: str, max_age: Optional[int]) -> None:
    # without max_age the browser drops the cookie at the end of the session
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=token,
        max_age=max_age,
        httponly=True,
        samesite="lax"
    )

@router.post("/register", response_model=AuthSuccessResponse, status_code=status.HTTP_201_CREATED)
async def register(
    response: Response,
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    psw: Optional[str] = Form(None),
    psw_repeat: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_session),
    token_service: TokenService = Depends(get_token_service)
):
    """Register a new account"""
    try:
        APILogger.log_request("register", username=username, email=email)

        auth_service = AuthService(db, token_service)
        result = await auth_service.register(username, email, psw, psw_repeat)
        _set_token_cookie(response, result["token"], None)

        APILogger.log_response(
            "register",
            user_id=result["user"]["id"],
            result="created"
        )

        return AuthSuccessResponse.create(
            code=ResponseCode.CREATE_SUCCESS,
            message="Success",
            data=AuthToken(
                user=AuthUser(**result["user"]),
                token=result["token"],
                ttl=result["ttl"]
            )
        )
    except ServiceError as e:
        APILogger.log_warning("register", e.message, code=e.code.value, username=username, email=email)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("register", e, username=username)
        raise HTTPException(status_code=500, detail="Couldn't register!")

@router.post("/login", response_model=AuthSuccessResponse)
async def login(
    response: Response,
    username: Optional[str] = Form(None),
    psw: Optional[str] = Form(None),
    remember_me: bool = Form(False),
    db: AsyncSession = Depends(get_session),
    token_service: TokenService = Depends(get_token_service)
):
    """Log in and store the session token in the Token cookie"""
    try:
        APILogger.log_request("login", username=username, remember_me=remember_me)

        auth_service = AuthService(db, token_service)
        result = await auth_service.login(username, psw, remember=remember_me)
        _set_token_cookie(response, result["token"], result["ttl"] if remember_me else None)

        APILogger.log_response(
            "login",
            user_id=result["user"]["id"],
            result="logged in"
        )

        return AuthSuccessResponse.create(
            code=ResponseCode.SUCCESS,
            message="Success",
            data=AuthToken(
                user=AuthUser(**result["user"]),
                token=result["token"],
                ttl=result["ttl"]
            )
        )
    except ServiceError as e:
        APILogger.log_warning("login", e.message, code=e.code.value, username=username)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("login", e, username=username)
        raise HTTPException(status_code=500, detail="Couldn't log in!")

@router.get("/logout", response_model=AuthSimpleSuccessResponse)
async def logout(
    response: Response,
    identity: Identity = Depends(get_identity)
):
    """Drop the session cookie"""
    APILogger.log_request("logout", user=identity.screen_name)
    response.delete_cookie(settings.TOKEN_COOKIE_NAME)
    return AuthSimpleSuccessResponse.create(
        code=ResponseCode.SUCCESS,
        message="Logged out",
        data={"username": identity.screen_name}
    )

@router.put("/email", response_model=AuthUserSuccessResponse)
async def update_email(
    email: Optional[str] = Form(None),
    psw: Optional[str] = Form(None),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session),
    token_service: TokenService = Depends(get_token_service)
):
    """Change the caller's email"""
    try:
        APILogger.log_request("update email", user=identity.screen_name, email=email)

        auth_service = AuthService(db, token_service)
        user = await auth_service.update_email(identity, email, psw)

        APILogger.log_response("update email", user_id=user["id"], result="updated")

        return AuthUserSuccessResponse.create(
            code=ResponseCode.UPDATE_SUCCESS,
            message="Email updated!",
            data=AuthUser(**user)
        )
    except ServiceError as e:
        APILogger.log_warning("update email", e.message, code=e.code.value, user=identity.screen_name)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("update email", e, user=identity.screen_name)
        raise HTTPException(status_code=500, detail="Couldn't update email!")

@router.put("/password", response_model=AuthUserSuccessResponse)
async def update_password(
    psw: Optional[str] = Form(None),
    new_psw: Optional[str] = Form(None),
    new_psw_repeat: Optional[str] = Form(None),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session),
    token_service: TokenService = Depends(get_token_service)
):
    """Change the caller's password"""
    try:
        APILogger.log_request("update password", user=identity.screen_name)

        auth_service = AuthService(db, token_service)
        user = await auth_service.update_password(identity, psw, new_psw, new_psw_repeat)

        APILogger.log_response("update password", user_id=user["id"], result="updated")

        return AuthUserSuccessResponse.create(
            code=ResponseCode.UPDATE_SUCCESS,
            message="Password updated!",
            data=AuthUser(**user)
        )
    except ServiceError as e:
        APILogger.log_warning("update password", e.message, code=e.code.value, user=identity.screen_name)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("update password", e, user=identity.screen_name)
        raise HTTPException(status_code=500, detail="Couldn't update password!")
