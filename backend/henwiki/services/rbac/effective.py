from henwiki.repositories.stores import PermissionStore, RoleStore

from .permission_cache import PermissionCache


async def compute_effective_permissions(
    user_id: int,
    roles: RoleStore,
    permissions: PermissionStore,
) -> frozenset[str]:
    """用户持有的全部角色的权限 code 并集，每次调用都从存储重新计算"""
    held = await roles.list_for_user(user_id)
    if not held:
        return frozenset()
    return frozenset(await permissions.codes_for_roles([role.id for role in held]))


async def resolve_effective_permissions(
    user_id: int,
    roles: RoleStore,
    permissions: PermissionStore,
    cache: PermissionCache | None = None,
) -> frozenset[str]:
    if cache is None:
        return await compute_effective_permissions(user_id, roles, permissions)
    version = await cache.version(user_id)
    cached = await cache.get(user_id, version)
    if cached is not None:
        return cached
    codes = await compute_effective_permissions(user_id, roles, permissions)
    await cache.set(user_id, codes, version)
    return codes
