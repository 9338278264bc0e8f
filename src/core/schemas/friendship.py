from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from .response import SuccessResponse

class ViewpointStatus(str, Enum):
    """How the edge between viewer and subject looks from the viewer's side"""
    SELF = "self"
    FRIEND = "friend"
    INVITEE = "invitee"  # viewer has an incoming request to act on
    REJECTOR = "rejector"  # the other party rejected the viewer's request
    PENDING_FROM_ME = "pending_from_me"
    NOT_RELATED = "not_related"

class FriendshipDecision(str, Enum):
    """Decision the recipient can record"""
    ACCEPTED = "accepted"
    REJECTED = "rejected"

class FriendshipState(str, Enum):
    """Values of the state form field on PUT /friends/requests/{id}"""
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

class FriendshipInDB(BaseModel):
    """Friendship edge as stored"""
    id: int = Field(..., description="Edge ID")
    user_id: int = Field(..., description="Requester account ID")
    friend_id: int = Field(..., description="Recipient account ID")
    accepted: bool = Field(False, description="Recipient accepted")
    rejected: bool = Field(False, description="Recipient rejected")
    cancelled: bool = Field(False, description="Requester withdrew the request")
    created_at: datetime = Field(..., description="Creation time")
    decided_at: Optional[datetime] = Field(None, description="Time of the last decision")

    class Config:
        from_attributes = True

class FriendshipDetails(BaseModel):
    """One row of a friends/requests list"""
    id: int = Field(..., description="Edge ID")
    screen_name: str = Field(..., description="Screen name of the other party")
    accepted: bool
    rejected: bool
    cancelled: bool
    created_at: datetime

class FriendshipPage(BaseModel):
    """A page of a friendship list"""
    friends: List[FriendshipDetails] = Field(default_factory=list)
    records: int = Field(0, description="Total matching rows")
    page: int = Field(0, description="Zero-based page number")
    pages: int = Field(0, description="Total number of pages")

class FriendStatusResponse(BaseModel):
    """Relationship between the viewer and a profile owner"""
    username: str
    status: ViewpointStatus
    friendship_id: Optional[int] = None

FriendshipSuccessResponse = SuccessResponse[FriendshipInDB]
FriendshipPageSuccessResponse = SuccessResponse[FriendshipPage]
FriendStatusSuccessResponse = SuccessResponse[FriendStatusResponse]
