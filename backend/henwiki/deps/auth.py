"""
Auth/ACL 依赖

认证方式：Authorization: Bearer <token>（HS256 access token）

依赖使用：
- get_current_identity: 校验凭证，失败 401，且不会触发任何角色/权限查询
- require_permission / require_any_permission / require_all_permissions:
  依赖工厂，先认证（401）再校验权限（403）
- get_user_profile_service: /users/me 使用的资料服务
"""
from collections.abc import Callable, Iterable

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from henwiki.core.database import get_db
from henwiki.repositories import PermissionRepository, RoleRepository, UserRepository
from henwiki.services.user_profile_service import UserProfileService
from henwiki.services.rbac import (
    AssignmentService,
    AuthorizationGate,
    Identity,
    IdentityVerifier,
    PermissionCache,
    PermissionCatalog,
    RoleService,
)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


def get_permission_cache(request: Request) -> PermissionCache:
    return request.app.state.permission_cache


def get_role_store(db: AsyncSession = Depends(get_db)) -> RoleRepository:
    return RoleRepository(db)


def get_permission_store(db: AsyncSession = Depends(get_db)) -> PermissionRepository:
    return PermissionRepository(db)


def get_authorization_gate(
    roles: RoleRepository = Depends(get_role_store),
    permissions: PermissionRepository = Depends(get_permission_store),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    cache: PermissionCache = Depends(get_permission_cache),
) -> AuthorizationGate:
    return AuthorizationGate(roles, permissions, verifier, cache)


def get_role_service(
    db: AsyncSession = Depends(get_db),
    roles: RoleRepository = Depends(get_role_store),
    permissions: PermissionRepository = Depends(get_permission_store),
    cache: PermissionCache = Depends(get_permission_cache),
) -> RoleService:
    return RoleService(db, roles, permissions, cache)


def get_assignment_service(
    db: AsyncSession = Depends(get_db),
    roles: RoleRepository = Depends(get_role_store),
    permissions: PermissionRepository = Depends(get_permission_store),
    cache: PermissionCache = Depends(get_permission_cache),
) -> AssignmentService:
    return AssignmentService(db, roles, permissions, UserRepository(db), cache)


def get_permission_catalog(
    roles: RoleRepository = Depends(get_role_store),
    permissions: PermissionRepository = Depends(get_permission_store),
    cache: PermissionCache = Depends(get_permission_cache),
) -> PermissionCatalog:
    return PermissionCatalog(permissions, roles, cache)


async def get_current_identity(
    authorization: str | None = Header(default=None, alias="Authorization"),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> Identity:
    return await gate.require_auth(authorization)


def require_permission(code: str) -> Callable:
    """
    依赖工厂：校验当前用户是否具备指定权限 code
    """

    async def _checker(
        identity: Identity = Depends(get_current_identity),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> Identity:
        return await gate.require_permission(identity, code)

    return _checker


def require_any_permission(codes: Iterable[str]) -> Callable:
    required = tuple(codes)
    if not required:
        raise ValueError("require_any_permission needs at least one code")

    async def _checker(
        identity: Identity = Depends(get_current_identity),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> Identity:
        return await gate.require_any_permission(identity, required)

    return _checker


def require_all_permissions(codes: Iterable[str]) -> Callable:
    required = tuple(codes)
    if not required:
        raise ValueError("require_all_permissions needs at least one code")

    async def _checker(
        identity: Identity = Depends(get_current_identity),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> Identity:
        return await gate.require_all_permissions(identity, required)

    return _checker


def get_user_profile_service(
    db: AsyncSession = Depends(get_db),
    roles: RoleService = Depends(get_role_service),
    catalog: PermissionCatalog = Depends(get_permission_catalog),
) -> UserProfileService:
    return UserProfileService(UserRepository(db), roles, catalog)
