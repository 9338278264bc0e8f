from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth import Identity, get_identity
from src.core.database import get_session
from src.core.exceptions import ServiceError
from src.core.schemas.community import CommunityPageSuccessResponse
from src.core.schemas.response import ResponseCode
from src.core.services.community import CommunityService
from src.core.utils.logger import APILogger

router = APIRouter()

@router.get("/community", response_model=CommunityPageSuccessResponse)
@router.get("/community/search", response_model=CommunityPageSuccessResponse)
async def community(
    page: int = Query(0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """Page through every other account"""
    try:
        APILogger.log_request("community", user=identity.screen_name, page=page)

        service = CommunityService(db)
        result = await service.list_users(identity, page)

        APILogger.log_response("community", user=identity.screen_name, records=result.records, pages=result.pages)

        return CommunityPageSuccessResponse.create(
            code=ResponseCode.SUCCESS,
            message=f"{result.records} users found",
            data=result
        )
    except ServiceError as e:
        APILogger.log_warning("community", e.message, code=e.code.value, user=identity.screen_name, page=page)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("community", e, user=identity.screen_name, page=page)
        raise HTTPException(status_code=500, detail="Couldn't load users!")

@router.get("/community/users", response_model=CommunityPageSuccessResponse)
@router.get("/community/users/search", response_model=CommunityPageSuccessResponse)
async def search_users(
    username: Optional[str] = Query(None),
    page: int = Query(0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_session)
):
    """Search other accounts by screen name fragment"""
    try:
        APILogger.log_request("search users", user=identity.screen_name, username=username, page=page)

        service = CommunityService(db)
        result = await service.search_users(identity, username, page)

        APILogger.log_response("search users", user=identity.screen_name, records=result.records, pages=result.pages)

        return CommunityPageSuccessResponse.create(
            code=ResponseCode.SUCCESS,
            message=f"{result.records} users found",
            data=result
        )
    except ServiceError as e:
        APILogger.log_warning(
            "search users",
            e.message,
            code=e.code.value,
            user=identity.screen_name,
            username=username,
            page=page
        )
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        APILogger.log_error("search users", e, user=identity.screen_name, username=username)
        raise HTTPException(status_code=500, detail="Couldn't search users!")
