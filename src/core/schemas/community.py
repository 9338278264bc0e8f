from typing import List
from pydantic import BaseModel, Field

from .response import SuccessResponse

class CommunityUser(BaseModel):
    """One account in the community directory"""
    id: int = Field(..., description="Account ID")
    screen_name: str = Field(..., description="Screen name")
    avatar: bool = Field(False, description="Has an uploaded avatar")

    class Config:
        from_attributes = True

class CommunityPage(BaseModel):
    """A page of the community directory"""
    users: List[CommunityUser] = Field(default_factory=list)
    query: str = Field("", description="Screen name fragment searched for")
    records: int = Field(0, description="Total matching accounts")
    page: int = Field(0, description="Zero-based page number")
    pages: int = Field(0, description="Total number of pages")

CommunityPageSuccessResponse = SuccessResponse[CommunityPage]
