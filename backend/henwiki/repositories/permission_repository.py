from collections import defaultdict
from collections.abc import Iterable, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from henwiki.constants.permissions import PermissionItem
from henwiki.models import Permission, RolePermission

from .role_repository import dedupe_ids

_CATALOG_ORDER = (Permission.module, Permission.resource, Permission.action)


class PermissionRepository:
    """
    权限仓库：权限目录查询与角色-权限关联。
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[Permission]:
        stmt = select(Permission).order_by(*_CATALOG_ORDER)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_module(self, module: str) -> list[Permission]:
        stmt = select(Permission).where(Permission.module == module).order_by(*_CATALOG_ORDER)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_role(self, role_id: int) -> list[Permission]:
        stmt = (
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(*_CATALOG_ORDER)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_roles(self, role_ids: Sequence[int]) -> dict[int, list[Permission]]:
        """批量获取多个角色的权限，未授予任何权限的角色映射到空列表"""
        grouped: dict[int, list[Permission]] = {role_id: [] for role_id in role_ids}
        if not grouped:
            return grouped
        stmt = (
            select(RolePermission.role_id, Permission)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(RolePermission.role_id.in_(grouped.keys()))
            .order_by(*_CATALOG_ORDER)
        )
        result = await self.session.execute(stmt)
        for role_id, permission in result.all():
            grouped[role_id].append(permission)
        return grouped

    async def codes_for_roles(self, role_ids: Sequence[int]) -> set[str]:
        """多个角色权限 code 的并集"""
        if not role_ids:
            return set()
        stmt = (
            select(Permission.code)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id.in_(set(role_ids)))
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def existing_ids(self, permission_ids: Iterable[int]) -> set[int]:
        ids = set(permission_ids)
        if not ids:
            return set()
        stmt = select(Permission.id).where(Permission.id.in_(ids))
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def replace_role_permissions(self, role_id: int, permission_ids: Sequence[int]) -> None:
        """全量替换角色权限：先删后插，需在同一事务内调用"""
        await self.session.execute(
            delete(RolePermission)
            .where(RolePermission.role_id == role_id)
            .execution_options(synchronize_session=False)
        )
        ids = dedupe_ids(permission_ids)
        if ids:
            await self.session.execute(
                insert(RolePermission),
                [{"role_id": role_id, "permission_id": permission_id} for permission_id in ids],
            )
        await self.session.flush()

    async def ids_by_codes(self, codes: Iterable[str]) -> dict[str, int]:
        codes = set(codes)
        if not codes:
            return {}
        stmt = select(Permission.code, Permission.id).where(Permission.code.in_(codes))
        result = await self.session.execute(stmt)
        return {code: permission_id for code, permission_id in result.all()}

    async def upsert_catalog(self, items: Iterable[PermissionItem]) -> int:
        """按 code 幂等写入权限目录，已存在的只刷新名称与分组字段，返回新增数量"""
        items = list(items)
        existing = {
            p.code: p
            for p in (
                await self.session.execute(
                    select(Permission).where(Permission.code.in_([i.code for i in items]))
                )
            ).scalars()
        }
        created = 0
        for item in items:
            permission = existing.get(item.code)
            if permission is None:
                self.session.add(
                    Permission(
                        code=item.code,
                        name=item.name,
                        module=item.module,
                        resource=item.resource,
                        action=item.action,
                    )
                )
                created += 1
            else:
                permission.name = item.name
                permission.module = item.module
                permission.resource = item.resource
                permission.action = item.action
        await self.session.flush()
        return created
