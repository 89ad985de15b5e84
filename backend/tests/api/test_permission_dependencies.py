import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from henwiki.core.error_handlers import register_exception_handlers
from henwiki.deps.auth import require_all_permissions, require_any_permission, require_permission
from henwiki.services.rbac import Identity, JWTIdentityVerifier, PermissionCache


@pytest.fixture
def gated_app(database, cache_service) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.state.database = database
    app.state.cache = cache_service
    app.state.permission_cache = PermissionCache(cache_service)
    app.state.identity_verifier = JWTIdentityVerifier()

    @app.get("/review")
    async def review(identity: Identity = Depends(require_any_permission(["admin.terms.approve", "admin.papers.approve"]))):
        return {"user_id": identity.user_id}

    @app.get("/ads")
    async def ads(identity: Identity = Depends(require_all_permissions(["admin.ads.view", "admin.ads.edit"]))):
        return {"user_id": identity.user_id}

    @app.get("/roles")
    async def roles(identity: Identity = Depends(require_permission("admin.roles.view"))):
        return {"user_id": identity.user_id}

    return app


@pytest.mark.asyncio
async def test_any_all_and_single_dependencies(gated_app, accounts):
    async with AsyncClient(transport=ASGITransport(app=gated_app), base_url="http://test") as ac:
        assert (await ac.get("/review", headers=accounts["editor"].headers)).status_code == 200
        assert (await ac.get("/review", headers=accounts["member"].headers)).status_code == 403

        assert (await ac.get("/ads", headers=accounts["admin"].headers)).status_code == 200
        denied = await ac.get("/ads", headers=accounts["editor"].headers)
        assert denied.status_code == 403
        assert denied.json()["missing_permissions"] == ["admin.ads.edit", "admin.ads.view"]

        ok = await ac.get("/roles", headers=accounts["root"].headers)
        assert ok.json() == {"user_id": accounts["root"].user_id}


@pytest.mark.asyncio
async def test_authentication_is_checked_before_permissions(gated_app, accounts):
    async with AsyncClient(transport=ASGITransport(app=gated_app), base_url="http://test") as ac:
        for path in ("/review", "/ads", "/roles"):
            resp = await ac.get(path, headers={"Authorization": "Bearer nope"})
            assert resp.status_code == 401


def test_dependency_factories_need_codes():
    with pytest.raises(ValueError):
        require_any_permission([])
    with pytest.raises(ValueError):
        require_all_permissions([])
