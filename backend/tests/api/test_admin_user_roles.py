import pytest

ROLES_URL = "/api/v1/admin/roles"


def _user_roles_url(user_id: int) -> str:
    return f"/api/v1/admin/users/{user_id}/roles"


async def _role_ids(client, headers) -> dict[str, int]:
    resp = await client.get(ROLES_URL, headers=headers)
    return {r["code"]: r["id"] for r in resp.json()["roles"]}


@pytest.mark.asyncio
async def test_admin_can_view_user_roles(client, accounts):
    resp = await client.get(_user_roles_url(accounts["editor"].user_id), headers=accounts["admin"].headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["user_id"] == accounts["editor"].user_id
    assert [r["code"] for r in body["roles"]] == ["editor"]


@pytest.mark.asyncio
async def test_view_user_roles_requires_users_view(client, accounts):
    resp = await client.get(_user_roles_url(accounts["member"].user_id), headers=accounts["editor"].headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_assign_roles_is_full_replace(client, accounts):
    headers = accounts["root"].headers
    ids = await _role_ids(client, headers)
    target = accounts["member"].user_id

    first = await client.put(_user_roles_url(target), json={"role_ids": [ids["editor"], ids["user"]]}, headers=headers)
    assert first.status_code == 200
    assert [r["code"] for r in first.json()["roles"]] == ["editor", "user"]

    second = await client.put(_user_roles_url(target), json={"role_ids": [ids["admin"], ids["admin"]]}, headers=headers)
    assert [r["code"] for r in second.json()["roles"]] == ["admin"]


@pytest.mark.asyncio
async def test_empty_assignment_revokes_access(client, accounts):
    root = accounts["root"].headers
    editor = accounts["editor"]

    assert (await client.get("/api/v1/users/me", headers=editor.headers)).json()["permissions"]

    resp = await client.put(_user_roles_url(editor.user_id), json={"role_ids": []}, headers=root)
    assert resp.status_code == 200
    assert resp.json()["roles"] == []

    me = await client.get("/api/v1/users/me", headers=editor.headers)
    assert me.json()["permissions"] == []


@pytest.mark.asyncio
async def test_admin_role_cannot_assign_roles(client, accounts):
    resp = await client.put(
        _user_roles_url(accounts["member"].user_id),
        json={"role_ids": []},
        headers=accounts["admin"].headers,
    )
    assert resp.status_code == 403
    assert resp.json()["missing_permissions"] == ["admin.users.role.assign"]


@pytest.mark.asyncio
async def test_assign_to_missing_user_or_role_is_not_found(client, accounts):
    headers = accounts["root"].headers

    missing_user = await client.put(_user_roles_url(999999), json={"role_ids": []}, headers=headers)
    assert missing_user.status_code == 404

    missing_role = await client.put(
        _user_roles_url(accounts["member"].user_id), json={"role_ids": [999999]}, headers=headers
    )
    assert missing_role.status_code == 404

    still = await client.get(_user_roles_url(accounts["member"].user_id), headers=headers)
    assert [r["code"] for r in still.json()["roles"]] == ["user"]
