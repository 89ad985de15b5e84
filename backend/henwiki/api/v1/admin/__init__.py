"""
Admin API 路由包
"""
from .permissions_route import router as permissions_router
from .roles_route import router as roles_router
from .user_roles_route import router as user_roles_router

__all__ = [
    "permissions_router",
    "roles_router",
    "user_roles_router",
]
