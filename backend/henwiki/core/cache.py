import pickle
from typing import Any

from redis.asyncio import Redis, from_url

from henwiki.core.config import settings
from henwiki.core.logging import logger


class CacheService:
    """
    Redis 缓存服务

    未配置 REDIS_URL 时所有操作降级为空操作（get 返回 None）。
    """
    def __init__(self):
        self._redis: Redis | None = None

    def init(self) -> None:
        """初始化 Redis 连接池"""
        if settings.REDIS_URL:
            self._redis = from_url(
                settings.REDIS_URL,
                encoding=settings.REDIS_ENCODING,
                decode_responses=False,  # 手动处理序列化
            )
            logger.info("redis_initialized", extra={"url": settings.REDIS_URL})
        else:
            logger.warning("REDIS_URL not set, cache will be disabled")

    async def close(self) -> None:
        """关闭 Redis 连接"""
        if self._redis:
            await self._redis.close()
            self._redis = None
            logger.info("Redis connection closed")

    @property
    def enabled(self) -> bool:
        return self._redis is not None

    def _make_key(self, key: str) -> str:
        return f"{settings.CACHE_PREFIX}{key}"

    async def get(self, key: str) -> Any | None:
        """获取缓存值 (自动反序列化)"""
        if not self._redis:
            return None
        try:
            data = await self._redis.get(self._make_key(key))
            if data:
                return pickle.loads(data)
        except Exception as e:
            logger.error(f"Cache get error for key {key}: {e}")
        return None

    async def set(self, key: str, value: Any, ttl: int | None = settings.CACHE_DEFAULT_TTL) -> bool:
        """设置缓存值 (自动序列化)"""
        if not self._redis:
            return False
        try:
            return bool(await self._redis.set(self._make_key(key), pickle.dumps(value), ex=ttl))
        except Exception as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """删除缓存"""
        if not self._redis:
            return False
        try:
            await self._redis.delete(self._make_key(key))
            return True
        except Exception as e:
            logger.error(f"Cache delete error for key {key}: {e}")
            return False

    async def incr(self, key: str, ttl: int | None = None, amount: int = 1) -> int:
        """原子自增计数，首次创建时可设置过期时间"""
        if not self._redis:
            return 0
        try:
            full_key = self._make_key(key)
            val = await self._redis.incr(full_key, amount)
            if ttl and val == 1:
                await self._redis.expire(full_key, ttl)
            return int(val)
        except Exception as e:
            logger.error(f"Cache incr error for key {key}: {e}")
            return 0

    async def get_counter(self, key: str) -> int:
        """读取 incr 维护的计数（未设置时为 0）"""
        if not self._redis:
            return 0
        try:
            val = await self._redis.get(self._make_key(key))
            return int(val) if val is not None else 0
        except Exception as e:
            logger.error(f"Cache get_counter error for key {key}: {e}")
            return 0

    async def clear_prefix(self, prefix: str) -> int:
        """根据前缀清除缓存（SCAN 遍历，不阻塞 Redis）"""
        if not self._redis:
            return 0
        try:
            # prefix 不需要包含 settings.CACHE_PREFIX，这里补全为完整 pattern
            pattern = f"{settings.CACHE_PREFIX}{prefix}*"
            removed = 0
            batch: list[Any] = []
            async for key in self._redis.scan_iter(match=pattern, count=500):
                batch.append(key)
                if len(batch) >= 500:
                    removed += await self._redis.delete(*batch)
                    batch = []
            if batch:
                removed += await self._redis.delete(*batch)
            return removed
        except Exception as e:
            logger.error(f"Cache clear_prefix error for {prefix}: {e}")
            return 0

    # ====== 版本化缓存 ======

    async def set_with_version(
        self,
        key: str,
        value: Any,
        version: Any,
        ttl: int | None = settings.CACHE_DEFAULT_TTL,
    ) -> bool:
        """带版本号写缓存，防止失效后旧值复活"""
        return await self.set(key, {"v": version, "data": value}, ttl=ttl)

    async def get_with_version(self, key: str, expected_version: Any) -> Any | None:
        """读取并校验版本，不匹配时返回 None"""
        data = await self.get(key)
        if isinstance(data, dict) and data.get("v") == expected_version:
            return data.get("data")
        return None
