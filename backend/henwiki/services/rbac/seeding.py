"""
权限目录与系统角色的幂等写入。

直接走仓库层而不是 RoleService，因此可以为系统角色授予权限；
管理后台对系统角色的任何改动都会被 RoleLifecycleGuard 拒绝。
"""
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from henwiki.constants.permissions import PERMISSION_REGISTRY, SYSTEM_ROLES, role_permission_codes
from henwiki.core.database import atomic
from henwiki.core.logging import logger
from henwiki.repositories import PermissionRepository, RoleRepository


@dataclass
class SeedReport:
    permissions_created: int = 0
    roles_created: int = 0


async def seed_rbac_catalog(db: AsyncSession) -> SeedReport:
    permissions = PermissionRepository(db)
    roles = RoleRepository(db)
    report = SeedReport()

    async with atomic(db):
        report.permissions_created = await permissions.upsert_catalog(PERMISSION_REGISTRY)
        ids_by_code = await permissions.ids_by_codes(p.code for p in PERMISSION_REGISTRY)

        for item in SYSTEM_ROLES:
            role = await roles.find_by_code(item.code)
            if role is None:
                role = await roles.create(
                    code=item.code,
                    name=item.name,
                    description=item.description,
                    level=item.level,
                    is_system=True,
                )
                report.roles_created += 1
            await permissions.replace_role_permissions(
                role.id, [ids_by_code[code] for code in role_permission_codes(item.code)]
            )

    logger.info(
        "rbac_catalog_seeded",
        extra={"permissions_created": report.permissions_created, "roles_created": report.roles_created},
    )
    return report
