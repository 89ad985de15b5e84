from .permission_repository import PermissionRepository
from .role_repository import RoleRepository
from .stores import PermissionStore, RoleStore
from .user_repository import UserRepository

__all__ = [
    "PermissionRepository",
    "PermissionStore",
    "RoleRepository",
    "RoleStore",
    "UserRepository",
]
