"""
RBAC 领域异常

所有异常都继承 RBACError，并携带 HTTP 状态码与稳定的 error_code，
由 henwiki.core.error_handlers 在传输边界统一映射。
"""
from collections.abc import Iterable


class RBACError(Exception):
    """Base error for access control operations."""

    status_code: int = 500
    error_code: str = "rbac_error"
    default_message: str = "Access control error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(RBACError):
    """Raised when no valid credential is presented."""

    status_code = 401
    error_code = "unauthenticated"
    default_message = "Not authenticated"


class Forbidden(RBACError):
    """Raised when a verified identity lacks the required permission(s)."""

    status_code = 403
    error_code = "forbidden"
    default_message = "Insufficient permissions"

    def __init__(self, missing: Iterable[str] = (), message: str | None = None):
        self.missing = tuple(sorted(set(missing)))
        super().__init__(message)


class NotFound(RBACError):
    status_code = 404
    error_code = "not_found"
    default_message = "Resource not found"


class RoleNotFound(NotFound):
    def __init__(self, role_id: int):
        self.role_id = role_id
        super().__init__(f"Role {role_id} not found")


class UserNotFound(NotFound):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class UnknownPermissionIds(NotFound):
    def __init__(self, missing_ids: set[int]):
        self.missing_ids = missing_ids
        super().__init__("Unknown permission ids: " + ", ".join(str(i) for i in sorted(missing_ids)))


class UnknownRoleIds(NotFound):
    def __init__(self, missing_ids: set[int]):
        self.missing_ids = missing_ids
        super().__init__("Unknown role ids: " + ", ".join(str(i) for i in sorted(missing_ids)))


class Conflict(RBACError):
    status_code = 409
    error_code = "conflict"
    default_message = "Resource already exists"


class RoleCodeExists(Conflict):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Role code '{code}' already exists")


class SystemRoleImmutable(RBACError):
    """Raised on any update/delete/re-grant attempt against a system role."""

    status_code = 400
    error_code = "system_role_immutable"

    def __init__(self, role_code: str | None = None):
        self.role_code = role_code
        message = "System roles cannot be modified or deleted"
        if role_code:
            message = f"System role '{role_code}' cannot be modified or deleted"
        super().__init__(message)


__all__ = [
    "Conflict",
    "Forbidden",
    "NotFound",
    "RBACError",
    "RoleCodeExists",
    "RoleNotFound",
    "SystemRoleImmutable",
    "Unauthenticated",
    "UnknownPermissionIds",
    "UnknownRoleIds",
    "UserNotFound",
]
