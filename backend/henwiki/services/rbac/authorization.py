"""
鉴权闸门

每个受保护操作入口调用的检查函数：
- require_auth: 校验凭证，失败抛 Unauthenticated（不触发任何权限查询）
- require_permission: 有效权限集合包含指定 code
- require_any_permission: 与给定 code 集合有交集
- require_all_permissions: 包含给定的全部 code

权限 code 之间互不蕴含，按字符串精确比较；角色 level 从不参与判断。
闸门无状态、不重试，要么返回已校验的 Identity，要么抛出一个具名异常。
"""
from collections.abc import Iterable

from henwiki.core.exceptions import Forbidden
from henwiki.core.logging import logger
from henwiki.repositories.stores import PermissionStore, RoleStore

from .effective import resolve_effective_permissions
from .identity import Identity, IdentityVerifier
from .permission_cache import PermissionCache


def _normalize_codes(codes: Iterable[str]) -> frozenset[str]:
    if isinstance(codes, str):
        codes = [codes]
    normalized = frozenset(codes)
    if not normalized:
        raise ValueError("At least one permission code is required")
    return normalized


class AuthorizationGate:
    def __init__(
        self,
        roles: RoleStore,
        permissions: PermissionStore,
        verifier: IdentityVerifier,
        cache: PermissionCache | None = None,
    ):
        self.roles = roles
        self.permissions = permissions
        self.verifier = verifier
        self.cache = cache

    async def require_auth(self, authorization: str | None) -> Identity:
        return await self.verifier.verify(authorization)

    async def effective_permissions(self, identity: Identity) -> frozenset[str]:
        return await resolve_effective_permissions(
            identity.user_id, self.roles, self.permissions, self.cache
        )

    async def require_permission(self, identity: Identity, code: str) -> Identity:
        effective = await self.effective_permissions(identity)
        if code not in effective:
            self._deny(identity, required=[code], missing=[code], mode="single")
        return identity

    async def require_any_permission(self, identity: Identity, codes: Iterable[str]) -> Identity:
        required = _normalize_codes(codes)
        effective = await self.effective_permissions(identity)
        if not (effective & required):
            self._deny(identity, required=required, missing=required, mode="any")
        return identity

    async def require_all_permissions(self, identity: Identity, codes: Iterable[str]) -> Identity:
        required = _normalize_codes(codes)
        effective = await self.effective_permissions(identity)
        missing = required - effective
        if missing:
            self._deny(identity, required=required, missing=missing, mode="all")
        return identity

    async def authorize(
        self,
        authorization: str | None,
        *,
        any_of: Iterable[str] | None = None,
        all_of: Iterable[str] | None = None,
    ) -> Identity:
        """先认证再校验权限；未提供任何 code 时只做认证"""
        identity = await self.require_auth(authorization)
        if any_of is not None:
            await self.require_any_permission(identity, any_of)
        if all_of is not None:
            await self.require_all_permissions(identity, all_of)
        return identity

    @staticmethod
    def _deny(identity: Identity, *, required: Iterable[str], missing: Iterable[str], mode: str) -> None:
        missing = sorted(missing)
        logger.warning(
            "permission_denied",
            extra={
                "user_id": identity.user_id,
                "mode": mode,
                "required": sorted(required),
                "missing": missing,
            },
        )
        raise Forbidden(missing=missing)
