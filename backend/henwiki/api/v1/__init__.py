from henwiki.api.v1.admin import permissions_router as admin_permissions_router
from henwiki.api.v1.admin import roles_router as admin_roles_router
from henwiki.api.v1.admin import user_roles_router as admin_user_roles_router
from henwiki.api.v1.users_route import router as users_router

__all__ = [
    "admin_permissions_router",
    "admin_roles_router",
    "admin_user_roles_router",
    "users_router",
]
