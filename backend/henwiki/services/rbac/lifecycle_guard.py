from collections.abc import Iterable

from henwiki.core.exceptions import RoleNotFound, SystemRoleImmutable, UnknownRoleIds
from henwiki.core.logging import logger
from henwiki.models import Role
from henwiki.repositories.stores import RoleStore


class RoleLifecycleGuard:
    """
    角色生命周期规则：系统角色只能存在，不能被修改、删除或重新授权。

    存储层的 is_system = false 过滤是第二道防线，这里负责把违规明确报告出来。
    """

    def __init__(self, roles: RoleStore):
        self.roles = roles

    async def get_existing(self, role_id: int) -> Role:
        role = await self.roles.find_by_id(role_id)
        if role is None:
            raise RoleNotFound(role_id)
        return role

    async def ensure_mutable(self, role_id: int, action: str) -> Role:
        role = await self.get_existing(role_id)
        if role.is_system:
            logger.warning(
                "system_role_mutation_blocked",
                extra={"role_id": role.id, "role_code": role.code, "action": action},
            )
            raise SystemRoleImmutable(role.code)
        return role

    async def ensure_roles_exist(self, role_ids: Iterable[int]) -> None:
        wanted = set(role_ids)
        missing = wanted - await self.roles.existing_ids(wanted)
        if missing:
            raise UnknownRoleIds(missing)
