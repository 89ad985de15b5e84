from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from henwiki.models import Role, RolePermission, UserRole


def dedupe_ids(ids: Iterable[int]) -> list[int]:
    """去重并保持原顺序"""
    return list(dict.fromkeys(ids))


class RoleRepository:
    """
    角色仓库：角色 CRUD 与用户-角色关联。

    只 flush 不 commit，事务边界由上层 atomic() 控制。
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_code(self, code: str) -> Role | None:
        stmt = select(Role).where(Role.code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_id(self, role_id: int) -> Role | None:
        # populate_existing: 批量 UPDATE 之后需要拿到库里的最新值
        stmt = select(Role).where(Role.id == role_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Role]:
        stmt = select(Role).order_by(Role.level.desc(), Role.name.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: int) -> list[Role]:
        stmt = (
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.level.desc(), Role.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def highest_for_user(self, user_id: int) -> Role | None:
        """等级最高的角色；同等级取 id 最小者"""
        stmt = (
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.level.desc(), Role.id.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def existing_ids(self, role_ids: Iterable[int]) -> set[int]:
        ids = set(role_ids)
        if not ids:
            return set()
        stmt = select(Role.id).where(Role.id.in_(ids))
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def create(
        self,
        code: str,
        name: str,
        description: str | None = None,
        level: int = 0,
        is_system: bool = False,
    ) -> Role:
        """插入角色；code 重复时由唯一约束抛出 IntegrityError"""
        role = Role(code=code, name=name, description=description, level=level, is_system=is_system)
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def update_non_system(self, role_id: int, fields: Mapping[str, Any]) -> int:
        """部分更新非系统角色，返回受影响行数（系统角色恒为 0）"""
        if not fields:
            return 0
        stmt = (
            update(Role)
            .where(Role.id == role_id, Role.is_system.is_(False))
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0

    async def delete_non_system(self, role_id: int) -> int:
        """删除非系统角色及其关联行，返回删除的角色行数"""
        deletable = select(Role.id).where(Role.id == role_id, Role.is_system.is_(False))
        await self.session.execute(
            delete(RolePermission)
            .where(RolePermission.role_id.in_(deletable))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(UserRole)
            .where(UserRole.role_id.in_(deletable))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(
            delete(Role)
            .where(Role.id == role_id, Role.is_system.is_(False))
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount or 0

    async def replace_user_roles(self, user_id: int, role_ids: Sequence[int]) -> None:
        """全量替换用户角色：先删后插，需在同一事务内调用"""
        await self.session.execute(
            delete(UserRole)
            .where(UserRole.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        ids = dedupe_ids(role_ids)
        if ids:
            await self.session.execute(
                insert(UserRole),
                [{"user_id": user_id, "role_id": role_id} for role_id in ids],
            )
        await self.session.flush()
