"""
测试全局配置

- 禁用真实 Redis 连接，缓存相关测试统一使用内存 DummyRedis
- 每个测试使用独立的内存 SQLite (aiosqlite + StaticPool)，真实执行仓库层 SQL
- 提供种子权限目录与建用户的辅助 fixture
"""
from __future__ import annotations

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# 确保 backend/ 在 sys.path，便于导入 henwiki.* 与 main
BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

# 测试环境不读取外部 Redis，权限缓存默认关闭
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("PERMISSION_CACHE_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from henwiki.core.config import settings  # noqa: E402
from henwiki.models import Base, User  # noqa: E402
from henwiki.repositories import RoleRepository, UserRepository  # noqa: E402
from henwiki.services.rbac import seed_rbac_catalog  # noqa: E402

settings.REDIS_URL = ""

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class DummyRedis:
    """
    轻量内存 Redis 替身，覆盖 CacheService 使用到的方法：
    get/set/delete/incr/scan_iter/close
    """

    def __init__(self):
        self.store: dict[str, object] = {}

    async def get(self, key: str):
        return self.store.get(key)

    async def set(self, key: str, value, ex=None, nx: bool | None = None):
        if nx and key in self.store:
            return False
        self.store[key] = value
        return True

    async def delete(self, *keys):
        removed = 0
        for k in keys:
            if k in self.store:
                del self.store[k]
                removed += 1
        return removed

    async def incr(self, key: str, amount: int = 1):
        self.store[key] = int(self.store.get(key, 0)) + amount
        return self.store[key]

    async def expire(self, key: str, seconds: int):
        return key in self.store

    async def scan_iter(self, match: str | None = None, count: int | None = None):
        for key in list(self.store):
            if match is None or (key.startswith(match[:-1]) if match.endswith("*") else key == match):
                yield key

    async def close(self):
        self.store.clear()


@pytest.fixture
def dummy_redis() -> DummyRedis:
    return DummyRedis()


@pytest_asyncio.fixture
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    async with SessionLocal() as sess:
        yield sess
    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_session(async_session: AsyncSession) -> AsyncSession:
    """写入权限目录与四个系统角色"""
    await seed_rbac_catalog(async_session)
    return async_session


@pytest.fixture
def make_user(async_session: AsyncSession):
    """按邮箱建用户并提交"""

    async def _make(email: str, name: str | None = None) -> User:
        user = await UserRepository(async_session).create_user(email=email, name=name)
        await async_session.commit()
        return user

    return _make


@pytest.fixture
def make_role(async_session: AsyncSession):
    """直接经仓库建角色（可建系统角色），可选授予权限"""

    async def _make(code: str, level: int = 0, is_system: bool = False, name: str | None = None):
        role = await RoleRepository(async_session).create(
            code=code,
            name=name or code,
            level=level,
            is_system=is_system,
        )
        await async_session.commit()
        return role

    return _make
