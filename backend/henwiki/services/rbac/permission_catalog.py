from collections import defaultdict
from collections.abc import Iterable

from henwiki.constants.permissions import PERMISSION_CODES
from henwiki.models import Permission
from henwiki.repositories.stores import PermissionStore, RoleStore

from .effective import resolve_effective_permissions
from .permission_cache import PermissionCache


class PermissionCatalog:
    """只读的权限目录视图"""

    def __init__(
        self,
        permissions: PermissionStore,
        roles: RoleStore,
        cache: PermissionCache | None = None,
    ):
        self.permissions = permissions
        self.roles = roles
        self.cache = cache

    async def get_all_permissions(self) -> list[Permission]:
        return await self.permissions.list_all()

    async def get_permissions_by_module(self, module: str) -> list[Permission]:
        return await self.permissions.list_by_module(module)

    async def get_user_permission_codes(self, user_id: int) -> frozenset[str]:
        """与鉴权闸门内部计算一致的有效权限集合，仅用于展示"""
        return await resolve_effective_permissions(user_id, self.roles, self.permissions, self.cache)

    @staticmethod
    def group_by_module(permissions: list[Permission]) -> dict[str, list[Permission]]:
        grouped: dict[str, list[Permission]] = defaultdict(list)
        for permission in permissions:
            grouped[permission.module].append(permission)
        return dict(grouped)


def get_permission_flags(codes: Iterable[str], known: Iterable[str] = PERMISSION_CODES) -> dict[str, int]:
    """
    将权限 code 集合转换为 {can_xxx: 0/1} 标记，仅输出已注册的权限
    """
    granted = set(codes)
    return {f"can_{code.replace('.', '_')}": int(code in granted) for code in known}
