"""Version 1 API routers."""

from fastapi import APIRouter

from . import auth, posts, realtime, users

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(posts.router)
api_router.include_router(realtime.router)

__all__ = ["api_router"]
