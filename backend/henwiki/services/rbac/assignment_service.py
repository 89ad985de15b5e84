"""
分配服务：角色 <-> 权限、用户 <-> 角色 的全量替换。

删除旧关联与插入新关联在同一事务内完成，
并发读取只会看到替换前或替换后的完整集合，不会读到中间的空集合。
"""
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from henwiki.core.database import atomic
from henwiki.core.exceptions import UnknownPermissionIds, UserNotFound
from henwiki.core.logging import logger
from henwiki.models import Permission, Role
from henwiki.repositories import UserRepository
from henwiki.repositories.stores import PermissionStore, RoleStore

from .lifecycle_guard import RoleLifecycleGuard
from .permission_cache import PermissionCache


class AssignmentService:
    def __init__(
        self,
        db: AsyncSession,
        roles: RoleStore,
        permissions: PermissionStore,
        users: UserRepository,
        cache: PermissionCache | None = None,
    ):
        self.db = db
        self.roles = roles
        self.permissions = permissions
        self.users = users
        self.cache = cache
        self.guard = RoleLifecycleGuard(roles)

    async def get_role_permissions(self, role_id: int) -> list[Permission]:
        """角色权限，按 module/resource/action 排序；未授权时返回空列表"""
        return await self.permissions.list_for_role(role_id)

    async def assign_permissions_to_role(self, role_id: int, permission_ids: Sequence[int]) -> None:
        await self.guard.ensure_mutable(role_id, "assign_permissions")
        wanted = set(permission_ids)
        missing = wanted - await self.permissions.existing_ids(wanted)
        if missing:
            raise UnknownPermissionIds(missing)

        async with atomic(self.db):
            await self.permissions.replace_role_permissions(role_id, permission_ids)

        if self.cache is not None:
            await self.cache.invalidate_all()

        logger.info(
            "role_permissions_replaced",
            extra={"role_id": role_id, "permission_ids": sorted(wanted)},
        )

    async def assign_roles_to_user(self, user_id: int, role_ids: Sequence[int]) -> None:
        if await self.users.get_by_id(user_id) is None:
            raise UserNotFound(user_id)
        await self.guard.ensure_roles_exist(role_ids)

        async with atomic(self.db):
            await self.roles.replace_user_roles(user_id, role_ids)

        if self.cache is not None:
            await self.cache.invalidate_user(user_id)

        logger.info(
            "user_roles_replaced",
            extra={"user_id": user_id, "role_ids": sorted(set(role_ids))},
        )

    async def get_user_roles(self, user_id: int) -> list[Role]:
        if await self.users.get_by_id(user_id) is None:
            raise UserNotFound(user_id)
        return await self.roles.list_for_user(user_id)
