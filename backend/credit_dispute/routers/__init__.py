"""Credit Dispute Engine - API Routers"""
from .reports import router as reports_router
from .letters import router as letters_router
from .auth import router as auth_router

__all__ = [
    "reports_router",
    "letters_router",
    "auth_router",
]
