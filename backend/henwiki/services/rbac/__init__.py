from .assignment_service import AssignmentService
from .authorization import AuthorizationGate
from .effective import compute_effective_permissions, resolve_effective_permissions
from .identity import Identity, IdentityVerifier, JWTIdentityVerifier
from .lifecycle_guard import RoleLifecycleGuard
from .permission_cache import PermissionCache
from .permission_catalog import PermissionCatalog, get_permission_flags
from .role_service import RoleService, RoleWithPermissions
from .seeding import SeedReport, seed_rbac_catalog

__all__ = [
    "AssignmentService",
    "AuthorizationGate",
    "Identity",
    "IdentityVerifier",
    "JWTIdentityVerifier",
    "PermissionCache",
    "PermissionCatalog",
    "RoleLifecycleGuard",
    "RoleService",
    "RoleWithPermissions",
    "SeedReport",
    "compute_effective_permissions",
    "get_permission_flags",
    "resolve_effective_permissions",
    "seed_rbac_catalog",
]
