"""Web Routes Package

This module aggregates all page routers into a single router
that can be included in the main FastAPI application.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .calendar import router as calendar_router
from .home import router as home_router
from .mail import router as mail_router


web_router = APIRouter()

web_router.include_router(home_router, tags=["home"])
web_router.include_router(auth_router, prefix="/auth", tags=["auth"])
web_router.include_router(mail_router, prefix="/mail", tags=["mail"])
web_router.include_router(calendar_router, prefix="/calendar", tags=["calendar"])

__all__ = ["web_router"]
