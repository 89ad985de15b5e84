"""
Henwiki RBAC - FastAPI Application Entry Point

启动命令:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from henwiki.core import Database, settings, setup_logging
from henwiki.core.cache import CacheService
from henwiki.core.error_handlers import register_exception_handlers
from henwiki.services.rbac import JWTIdentityVerifier, PermissionCache

# 设置日志
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理：进程级句柄在这里显式创建与释放"""
    from henwiki.core.logging import logger

    logger.info("application_startup", extra={"project": settings.PROJECT_NAME})

    # 测试可以预先注入 database / cache，这里不覆盖
    database: Database = getattr(app.state, "database", None) or Database()
    database.init()
    app.state.database = database

    cache: CacheService = getattr(app.state, "cache", None) or CacheService()
    if not cache.enabled:
        try:
            cache.init()
        except Exception as exc:
            logger.warning(f"cache_init_failed: {exc}")
    app.state.cache = cache
    app.state.permission_cache = PermissionCache(cache)
    app.state.identity_verifier = JWTIdentityVerifier()

    yield

    try:
        await cache.close()
    except Exception as exc:
        logger.warning(f"cache_close_failed: {exc}")
    await database.dispose()
    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """创建 FastAPI 应用"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    # CORS 配置
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)

    return app


def register_routes(app: FastAPI) -> None:
    """注册所有 API 路由"""
    from henwiki.api.v1 import (
        admin_permissions_router,
        admin_roles_router,
        admin_user_roles_router,
        users_router,
    )

    api_prefix = settings.API_V1_STR

    app.include_router(users_router, prefix=api_prefix)
    app.include_router(admin_roles_router, prefix=api_prefix)
    app.include_router(admin_permissions_router, prefix=api_prefix)
    app.include_router(admin_user_roles_router, prefix=api_prefix)


# 创建应用实例
app = create_app()


def run():
    """脚本入口点"""
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
