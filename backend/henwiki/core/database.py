from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from henwiki.core.config import settings
from henwiki.core.logging import logger


class Database:
    """
    进程级存储句柄：启动时构建一次，显式 init()/dispose()，
    通过 app.state 传递给各个请求依赖，不使用模块级全局引擎。
    """

    def __init__(self, url: str | None = None, **engine_kwargs):
        self.url = url or settings.DATABASE_URL
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def init(self) -> None:
        if self._engine is not None:
            return
        kwargs = {
            "echo": settings.DEBUG,
            "future": True,
            "pool_pre_ping": True,
        }
        # 连接池配置（仅非 sqlite 场景启用）
        if not self.url.startswith("sqlite"):
            kwargs.update(pool_size=settings.DB_POOL_SIZE, max_overflow=settings.DB_MAX_OVERFLOW)
        kwargs.update(self._engine_kwargs)

        self._engine = create_async_engine(self.url, **kwargs)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("database_initialized", extra={"dialect": self._engine.dialect.name})

    async def dispose(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("database_disposed")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._sessionmaker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            yield session


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    单事务边界：成功则提交，任何异常都回滚后继续抛出。

    删除 + 插入等组合写操作必须包在同一个 atomic 块里，
    并发读方只能看到替换前或替换后的完整集合。
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 依赖项: 从进程级 Database 句柄获取 Session
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
