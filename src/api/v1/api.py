from fastapi import APIRouter
from .endpoints import auth, community, friendship, profile

api_router = APIRouter()

# Sessions and account settings
api_router.include_router(auth.router, tags=["auth"])

# Profiles
api_router.include_router(profile.router, tags=["profile"])

# Community directory
api_router.include_router(community.router, tags=["community"])

# Friendships
api_router.include_router(friendship.router, tags=["friends"])
