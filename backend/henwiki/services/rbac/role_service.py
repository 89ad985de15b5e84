"""
角色服务

- 读：按 code / id 查找、全部角色（level 降序、name 升序）、用户角色、用户最高角色
- 写：创建 / 部分更新 / 删除，每个写操作单事务完成
- 系统角色的修改与删除统一经 RoleLifecycleGuard 拒绝
"""
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from henwiki.core.database import atomic
from henwiki.core.exceptions import RoleCodeExists, UnknownPermissionIds
from henwiki.core.logging import logger
from henwiki.models import Permission, Role
from henwiki.repositories.stores import PermissionStore, RoleStore

from .lifecycle_guard import RoleLifecycleGuard
from .permission_cache import PermissionCache

UPDATABLE_FIELDS = frozenset({"name", "description", "level"})


@dataclass
class RoleWithPermissions:
    role: Role
    permissions: list[Permission] = field(default_factory=list)


class RoleService:
    def __init__(
        self,
        db: AsyncSession,
        roles: RoleStore,
        permissions: PermissionStore,
        cache: PermissionCache | None = None,
    ):
        self.db = db
        self.roles = roles
        self.permissions = permissions
        self.cache = cache
        self.guard = RoleLifecycleGuard(roles)

    async def find_role_by_code(self, code: str) -> Role | None:
        return await self.roles.find_by_code(code)

    async def find_role_by_id(self, role_id: int) -> Role | None:
        return await self.roles.find_by_id(role_id)

    async def get_all_roles(self) -> list[Role]:
        return await self.roles.list_all()

    async def get_user_roles(self, user_id: int) -> list[Role]:
        return await self.roles.list_for_user(user_id)

    async def get_user_highest_role(self, user_id: int) -> Role | None:
        return await self.roles.highest_for_user(user_id)

    async def get_role_with_permissions(self, role_id: int) -> RoleWithPermissions | None:
        role = await self.roles.find_by_id(role_id)
        if role is None:
            return None
        return RoleWithPermissions(role, await self.permissions.list_for_role(role.id))

    async def list_roles_with_permissions(self) -> list[RoleWithPermissions]:
        roles = await self.roles.list_all()
        grants = await self.permissions.list_for_roles([role.id for role in roles])
        return [RoleWithPermissions(role, grants[role.id]) for role in roles]

    async def create_role(
        self,
        code: str,
        name: str,
        description: str | None = None,
        level: int = 0,
        permission_ids: Sequence[int] | None = None,
    ) -> int:
        """
        创建自定义角色，可同时授予初始权限（同一事务）。

        code 的唯一性以数据库唯一约束为准，预检查只用于给出更早的报错。
        """
        if await self.roles.find_by_code(code) is not None:
            raise RoleCodeExists(code)
        if permission_ids:
            await self._ensure_permissions_exist(permission_ids)

        try:
            async with atomic(self.db):
                role = await self.roles.create(code=code, name=name, description=description, level=level)
                role_id = role.id
                if permission_ids is not None:
                    await self.permissions.replace_role_permissions(role_id, permission_ids)
        except IntegrityError as e:
            logger.warning("role_code_conflict", extra={"code": code})
            raise RoleCodeExists(code) from e

        logger.info(
            "role_created",
            extra={"role_id": role_id, "code": code, "level": level, "permission_count": len(set(permission_ids or []))},
        )
        return role_id

    async def update_role(
        self,
        role_id: int,
        changes: Mapping[str, Any],
        permission_ids: Sequence[int] | None = None,
    ) -> Role:
        """
        部分更新角色：只修改传入的 name / description / level。
        传入 permission_ids 时在同一事务内全量替换该角色的权限。
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported role fields: {', '.join(sorted(unknown))}")

        await self.guard.ensure_mutable(role_id, "update")
        if permission_ids:
            await self._ensure_permissions_exist(permission_ids)

        async with atomic(self.db):
            updated = await self.roles.update_non_system(role_id, changes)
            if permission_ids is not None:
                await self.permissions.replace_role_permissions(role_id, permission_ids)

        if permission_ids is not None and self.cache is not None:
            await self.cache.invalidate_all()

        logger.info(
            "role_updated",
            extra={
                "role_id": role_id,
                "fields": sorted(changes),
                "rows": updated,
                "permissions_replaced": permission_ids is not None,
            },
        )
        return await self.guard.get_existing(role_id)

    async def delete_role(self, role_id: int) -> None:
        role = await self.guard.ensure_mutable(role_id, "delete")

        async with atomic(self.db):
            await self.roles.delete_non_system(role_id)

        if self.cache is not None:
            await self.cache.invalidate_all()

        logger.info("role_deleted", extra={"role_id": role_id, "code": role.code})

    async def _ensure_permissions_exist(self, permission_ids: Sequence[int]) -> None:
        wanted = set(permission_ids)
        missing = wanted - await self.permissions.existing_ids(wanted)
        if missing:
            raise UnknownPermissionIds(missing)
