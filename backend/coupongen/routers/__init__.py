"""API routers."""
from coupongen.routers.health import router as health_router
from coupongen.routers.auth import router as auth_router
from coupongen.routers.admin import router as admin_router
from coupongen.routers.campaigns import router as campaigns_router
from coupongen.routers.store import router as store_router
from coupongen.routers.public import router as public_router

__all__ = [
    "health_router",
    "auth_router",
    "admin_router",
    "campaigns_router",
    "store_router",
    "public_router",
]
