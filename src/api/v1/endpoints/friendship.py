from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Form, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth import Identity, get_identity
from src.core.database import get_session
from src.core.exceptions import ServiceError, ValidationError
from src.core.schemas.friendship import (
    FriendshipDecision, FriendshipInDB, FriendshipPageSuccessResponse,
    FriendshipState, FriendshipSuccessResponse
)
from src.core.schemas.response import ResponseCode
from src.core.services.friendship import FriendshipService
from src.core.utils.logger import APILogger

router = APIRouter()

@router.post("/friendships", response_model=FriendshipSuccessResponse, status_code=status.HTTP_201_CREATED)
async def send_friend_request(
    username: Optional[str] = Form(None),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """Send a friend request"""
    try:
        APILogger.log_request(
            "send friend request",
            user=identity.screen_name,
            target=username
        )

        service = FriendshipService(db)
        edge = await service.send_friend_request(identity, username)

        APILogger.log_response(
            "send friend request",
            user=identity.screen_name,
            result="created",
            **APILogger.format_friendship_info(edge)
        )

        return FriendshipSuccessResponse.create(
            code=ResponseCode.CREATE_SUCCESS,
            message="Request sent!",
            data=FriendshipInDB.model_validate(edge)
        )
    except ServiceError as e:
        APILogger.log_warning(
            "send friend request",
            e.message,
            code=e.code.value,
            user=identity.screen_name,
            target=username
        )
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error(
            "send friend request",
            e,
            user=identity.screen_name,
            target=username
        )
        raise HTTPException(status_code=500, detail="Couldn't send request!")

@router.put("/friends/requests/{friendship_id}", response_model=FriendshipSuccessResponse)
async def change_request_state(
    friendship_id: int,
    state: Optional[str] = Form(None),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """Accept, reject or cancel a friend request"""
    try:
        APILogger.log_request(
            "change request state",
            user=identity.screen_name,
            request_id=friendship_id,
            state=state
        )

        try:
            new_state = FriendshipState(state)
        except ValueError:
            raise ValidationError("State must be one of: accepted, rejected, cancelled!")

        service = FriendshipService(db)
        if new_state is FriendshipState.CANCELLED:
            edge = await service.cancel_friend_request(identity, friendship_id)
        else:
            edge = await service.decide_friend_request(
                identity, friendship_id, FriendshipDecision(new_state.value)
            )

        APILogger.log_response(
            "change request state",
            user=identity.screen_name,
            result="updated",
            **APILogger.format_friendship_info(edge)
        )

        return FriendshipSuccessResponse.create(
            code=ResponseCode.UPDATE_SUCCESS,
            message=f"Request {new_state.value}!",
            data=FriendshipInDB.model_validate(edge)
        )
    except ServiceError as e:
        APILogger.log_warning(
            "change request state",
            e.message,
            code=e.code.value,
            user=identity.screen_name,
            request_id=friendship_id,
            state=state
        )
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error(
            "change request state",
            e,
            user=identity.screen_name,
            request_id=friendship_id
        )
        raise HTTPException(status_code=500, detail="Couldn't update request!")

@router.get("/friends", response_model=FriendshipPageSuccessResponse)
async def friends(
    page: int = Query(0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """List the caller's friends"""
    try:
        APILogger.log_request("list friends", user=identity.screen_name, page=page)

        service = FriendshipService(db)
        result = await service.list_friends(identity, page)

        APILogger.log_response(
            "list friends",
            user=identity.screen_name,
            records=result.records,
            pages=result.pages
        )

        return FriendshipPageSuccessResponse.create(
            code=ResponseCode.SUCCESS,
            message="OK",
            data=result
        )
    except ServiceError as e:
        APILogger.log_warning("list friends", e.message, code=e.code.value, user=identity.screen_name, page=page)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("list friends", e, user=identity.screen_name, page=page)
        raise HTTPException(status_code=500, detail="Couldn't load friends!")

@router.get("/friends/requests", response_model=FriendshipPageSuccessResponse)
async def requests(
    page: int = Query(0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """List requests waiting for the caller's decision"""
    try:
        APILogger.log_request("list friend requests", user=identity.screen_name, page=page)

        service = FriendshipService(db)
        result = await service.list_requests(identity, page)

        APILogger.log_response(
            "list friend requests",
            user=identity.screen_name,
            records=result.records,
            pages=result.pages
        )

        return FriendshipPageSuccessResponse.create(
            code=ResponseCode.SUCCESS,
            message="OK",
            data=result
        )
    except ServiceError as e:
        APILogger.log_warning("list friend requests", e.message, code=e.code.value, user=identity.screen_name, page=page)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("list friend requests", e, user=identity.screen_name, page=page)
        raise HTTPException(status_code=500, detail="Couldn't load requests!")

@router.get("/friends/requests/rejected", response_model=FriendshipPageSuccessResponse)
async def rejected_requests(
    page: int = Query(0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """List incoming requests that were rejected or cancelled"""
    try:
        APILogger.log_request("list rejected requests", user=identity.screen_name, page=page)

        service = FriendshipService(db)
        result = await service.list_rejected(identity, page)

        APILogger.log_response(
            "list rejected requests",
            user=identity.screen_name,
            records=result.records,
            pages=result.pages
        )

        return FriendshipPageSuccessResponse.create(
            code=ResponseCode.SUCCESS,
            message="OK",
            data=result
        )
    except ServiceError as e:
        APILogger.log_warning("list rejected requests", e.message, code=e.code.value, user=identity.screen_name, page=page)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("list rejected requests", e, user=identity.screen_name, page=page)
        raise HTTPException(status_code=500, detail="Couldn't load rejected requests!")
