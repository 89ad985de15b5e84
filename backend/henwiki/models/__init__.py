from .base import Base
from .user import Permission, Role, RolePermission, User, UserRole

__all__ = [
    "Base",
    "Permission",
    "Role",
    "RolePermission",
    "User",
    "UserRole",
]
