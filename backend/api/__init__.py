"""
API Routers
"""
from .auth import router as auth_router
from .profile import router as profile_router
from .feed import router as feed_router
from .records import routers as record_routers, RECORD_SERVICES

__all__ = ["auth_router", "profile_router", "feed_router", "record_routers", "RECORD_SERVICES"]
