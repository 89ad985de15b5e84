"""
测试配置与 fixtures（API 层）

- 使用内存 SQLite (aiosqlite) 构建进程级 Database 句柄并挂到 app.state
- ASGITransport 不会触发 lifespan，这里手动装配 app.state 上的各个句柄
- 用内存 Redis 替身挂载到 CacheService
- 用 create_access_token 为种子用户签发真实 JWT
"""
from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from henwiki.core.cache import CacheService
from henwiki.core.database import Database
from henwiki.models import Base
from henwiki.repositories import RoleRepository, UserRepository
from henwiki.services.rbac import JWTIdentityVerifier, PermissionCache, seed_rbac_catalog
from henwiki.utils.security import create_access_token
from main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@dataclass
class Account:
    user_id: int
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    db = Database(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.init()
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def cache_service(dummy_redis) -> CacheService:
    service = CacheService()
    service._redis = dummy_redis
    return service


@pytest_asyncio.fixture
async def test_app(database, cache_service):
    app.state.database = database
    app.state.cache = cache_service
    app.state.permission_cache = PermissionCache(cache_service)
    app.state.identity_verifier = JWTIdentityVerifier()
    yield app


@pytest_asyncio.fixture
async def accounts(database) -> dict[str, Account]:
    """
    种子数据：
    - root: super_admin
    - admin: admin
    - editor: editor
    - member: user
    - nobody: 无角色
    """
    role_by_account = {
        "root": "super_admin",
        "admin": "admin",
        "editor": "editor",
        "member": "user",
        "nobody": None,
    }
    result: dict[str, Account] = {}
    async with database.session() as session:
        await seed_rbac_catalog(session)
        users = UserRepository(session)
        roles = RoleRepository(session)
        for name, role_code in role_by_account.items():
            user = await users.create_user(email=f"{name}@example.com", name=name)
            if role_code:
                role = await roles.find_by_code(role_code)
                await roles.replace_user_roles(user.id, [role.id])
            result[name] = Account(user_id=user.id, token=create_access_token(user.id))
        await session.commit()
    return result


@pytest_asyncio.fixture
async def client(test_app, accounts) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac
