from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth import Identity, get_identity
from src.core.database import get_session
from src.core.exceptions import ServiceError
from src.core.schemas.friendship import FriendStatusResponse, FriendStatusSuccessResponse
from src.core.schemas.response import ResponseCode
from src.core.services.friendship import FriendshipService
from src.core.utils.logger import APILogger

router = APIRouter()

@router.get("/profile/{username}", response_model=FriendStatusSuccessResponse)
async def profile(
    username: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """Friendship status between the caller and a profile owner"""
    try:
        APILogger.log_request("profile", user=identity.screen_name, subject=username)

        service = FriendshipService(db)
        friend_status, friendship_id = await service.get_viewpoint_status(identity, username)

        APILogger.log_response(
            "profile",
            user=identity.screen_name,
            subject=username,
            status=friend_status.value
        )

        return FriendStatusSuccessResponse.create(
            code=ResponseCode.SUCCESS,
            message="OK",
            data=FriendStatusResponse(
                username=username,
                status=friend_status,
                friendship_id=friendship_id
            )
        )
    except ServiceError as e:
        APILogger.log_warning("profile", e.message, code=e.code.value, user=identity.screen_name, subject=username)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("profile", e, user=identity.screen_name, subject=username)
        raise HTTPException(status_code=500, detail="Couldn't load profile!")
