import pytest

ROLES_URL = "/api/v1/admin/roles"
PERMISSIONS_URL = "/api/v1/admin/permissions"


async def _permission_ids(client, headers, *codes: str) -> list[int]:
    resp = await client.get(PERMISSIONS_URL, headers=headers)
    by_code = {p["code"]: p["id"] for p in resp.json()["permissions"]}
    return [by_code[code] for code in codes]


async def _role_by_code(client, headers, code: str) -> dict:
    resp = await client.get(ROLES_URL, headers=headers)
    return next(r for r in resp.json()["roles"] if r["code"] == code)


@pytest.mark.asyncio
async def test_list_roles_requires_authentication(client):
    resp = await client.get(ROLES_URL)

    assert resp.status_code == 401
    assert resp.json()["error_code"] == "unauthenticated"
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_list_roles_rejects_invalid_token(client):
    resp = await client.get(ROLES_URL, headers={"Authorization": "Bearer broken"})
    assert resp.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("account", ["admin", "editor", "member", "nobody"])
async def test_list_roles_requires_roles_view(client, accounts, account):
    resp = await client.get(ROLES_URL, headers=accounts[account].headers)

    assert resp.status_code == 403
    body = resp.json()
    assert body["error_code"] == "forbidden"
    assert body["missing_permissions"] == ["admin.roles.view"]


@pytest.mark.asyncio
async def test_list_roles_embeds_permissions(client, accounts):
    resp = await client.get(ROLES_URL, headers=accounts["root"].headers)

    assert resp.status_code == 200
    roles = resp.json()["roles"]
    assert [r["code"] for r in roles] == ["super_admin", "admin", "editor", "user"]
    super_admin = roles[0]
    assert super_admin["is_system"] is True
    assert "admin.roles.delete" in {p["code"] for p in super_admin["permissions"]}
    assert roles[-1]["permissions"] == []


@pytest.mark.asyncio
async def test_create_role_with_permissions(client, accounts):
    headers = accounts["root"].headers
    ids = await _permission_ids(client, headers, "admin.terms.view", "admin.terms.approve")

    resp = await client.post(
        ROLES_URL,
        json={"code": "reviewer", "name": "审核员", "description": "词条初审", "level": 20, "permission_ids": ids},
        headers=headers,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["code"] == "reviewer"
    assert body["level"] == 20
    assert body["is_system"] is False
    assert [p["code"] for p in body["permissions"]] == ["admin.terms.approve", "admin.terms.view"]


@pytest.mark.asyncio
async def test_create_duplicate_role_conflicts(client, accounts):
    headers = accounts["root"].headers
    first = await client.post(ROLES_URL, json={"code": "reviewer", "name": "审核员"}, headers=headers)
    assert first.status_code == 201

    second = await client.post(ROLES_URL, json={"code": "reviewer", "name": "审核员2"}, headers=headers)
    assert second.status_code == 409
    assert second.json()["error_code"] == "conflict"

    system = await client.post(ROLES_URL, json={"code": "editor", "name": "编辑"}, headers=headers)
    assert system.status_code == 409


@pytest.mark.asyncio
async def test_create_role_with_unknown_permission_is_not_found(client, accounts):
    resp = await client.post(
        ROLES_URL,
        json={"code": "ghost", "name": "幽灵", "permission_ids": [987654]},
        headers=accounts["root"].headers,
    )
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "not_found"


@pytest.mark.asyncio
async def test_create_role_validates_payload(client, accounts):
    resp = await client.post(ROLES_URL, json={"code": "Bad Code", "name": ""}, headers=accounts["root"].headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_update_role_partially(client, accounts):
    headers = accounts["root"].headers
    created = await client.post(
        ROLES_URL, json={"code": "reviewer", "name": "审核员", "description": "初审", "level": 3}, headers=headers
    )
    role_id = created.json()["id"]

    resp = await client.put(f"{ROLES_URL}/{role_id}", json={"level": 9}, headers=headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["level"] == 9
    assert body["name"] == "审核员"
    assert body["description"] == "初审"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "level"])
async def test_update_role_rejects_null_for_required_field(client, accounts, field):
    headers = accounts["root"].headers
    created = await client.post(ROLES_URL, json={"code": "reviewer", "name": "审核员", "level": 3}, headers=headers)
    role_id = created.json()["id"]

    resp = await client.put(f"{ROLES_URL}/{role_id}", json={field: None}, headers=headers)

    assert resp.status_code == 422
    role = await _role_by_code(client, headers, "reviewer")
    assert role["name"] == "审核员"
    assert role["level"] == 3


@pytest.mark.asyncio
async def test_update_role_replaces_permissions(client, accounts):
    headers = accounts["root"].headers
    ids = await _permission_ids(client, headers, "admin.ads.view", "admin.ads.edit")
    created = await client.post(
        ROLES_URL, json={"code": "ads", "name": "广告", "permission_ids": ids}, headers=headers
    )
    role_id = created.json()["id"]

    resp = await client.put(f"{ROLES_URL}/{role_id}", json={"permission_ids": []}, headers=headers)

    assert resp.status_code == 200
    assert resp.json()["permissions"] == []


@pytest.mark.asyncio
async def test_system_roles_cannot_be_updated(client, accounts):
    headers = accounts["root"].headers
    super_admin = await _role_by_code(client, headers, "super_admin")

    resp = await client.put(f"{ROLES_URL}/{super_admin['id']}", json={"name": "x"}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error_code"] == "system_role_immutable"
    assert (await _role_by_code(client, headers, "super_admin"))["name"] == super_admin["name"]


@pytest.mark.asyncio
async def test_system_roles_cannot_be_deleted(client, accounts):
    headers = accounts["root"].headers
    editor = await _role_by_code(client, headers, "editor")

    resp = await client.delete(f"{ROLES_URL}/{editor['id']}", headers=headers)

    assert resp.status_code == 400
    assert (await _role_by_code(client, headers, "editor"))["permissions"] == editor["permissions"]


@pytest.mark.asyncio
async def test_delete_custom_role(client, accounts):
    headers = accounts["root"].headers
    created = await client.post(ROLES_URL, json={"code": "temp", "name": "临时"}, headers=headers)
    role_id = created.json()["id"]

    resp = await client.delete(f"{ROLES_URL}/{role_id}", headers=headers)
    assert resp.status_code == 200

    again = await client.delete(f"{ROLES_URL}/{role_id}", headers=headers)
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_update_missing_role_is_not_found(client, accounts):
    resp = await client.put(f"{ROLES_URL}/999999", json={"name": "x"}, headers=accounts["root"].headers)
    assert resp.status_code == 404
