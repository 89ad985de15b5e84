from collections.abc import Iterable

from henwiki.core.cache import CacheService
from henwiki.core.cache_keys import CacheKeys
from henwiki.core.config import settings
from henwiki.core.logging import logger

CacheVersion = tuple[int, int]


class PermissionCache:
    """
    有效权限集合的进程内可选缓存（Redis 承载）。

    PERMISSION_CACHE_ENABLED 关闭或 Redis 未配置时所有操作为空操作，
    每次鉴权都直接读库。不保证多实例之间的一致性。

    缓存值带 (全局代数, 用户代数) 版本号：读者在计算前取版本，写回时带上；
    失效时先递增代数，计算期间发生的失效会让写回的旧集合在下次读取时失配。
    """

    def __init__(self, cache: CacheService, enabled: bool | None = None, ttl: int | None = None):
        self.cache = cache
        self._enabled = settings.PERMISSION_CACHE_ENABLED if enabled is None else enabled
        self.ttl = settings.PERMISSION_CACHE_TTL if ttl is None else ttl

    @property
    def enabled(self) -> bool:
        return self._enabled and self.cache.enabled

    async def version(self, user_id: int) -> CacheVersion:
        if not self.enabled:
            return (0, 0)
        return (
            await self.cache.get_counter(CacheKeys.permissions_generation()),
            await self.cache.get_counter(CacheKeys.user_permissions_generation(user_id)),
        )

    async def get(self, user_id: int, version: CacheVersion | None = None) -> frozenset[str] | None:
        if not self.enabled:
            return None
        if version is None:
            version = await self.version(user_id)
        cached = await self.cache.get_with_version(CacheKeys.user_permissions(user_id), version)
        if cached is None:
            return None
        return frozenset(cached)

    async def set(self, user_id: int, codes: Iterable[str], version: CacheVersion) -> None:
        """version 必须是计算 codes 之前读取的版本；ttl=0 表示不过期"""
        if not self.enabled:
            return
        await self.cache.set_with_version(
            CacheKeys.user_permissions(user_id), sorted(codes), version, ttl=self.ttl or None
        )

    async def invalidate_user(self, user_id: int) -> None:
        if not self.enabled:
            return
        await self.cache.incr(CacheKeys.user_permissions_generation(user_id))
        await self.cache.delete(CacheKeys.user_permissions(user_id))
        logger.info("permission_cache_invalidated", extra={"scope": "user", "user_id": user_id})

    async def invalidate_all(self) -> None:
        if not self.enabled:
            return
        await self.cache.incr(CacheKeys.permissions_generation())
        removed = await self.cache.clear_prefix(CacheKeys.user_permissions_prefix())
        logger.info("permission_cache_invalidated", extra={"scope": "all", "removed": removed})
