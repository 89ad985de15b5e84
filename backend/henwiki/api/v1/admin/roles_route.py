"""
角色管理 API 路由 (/api/v1/admin/roles)

端点:
- GET /admin/roles - 全部角色（含权限）[权限: admin.roles.view]
- POST /admin/roles - 创建角色，可附带初始权限 [权限: admin.roles.create]
- PUT /admin/roles/{role_id} - 部分更新角色 / 全量替换权限 [权限: admin.roles.edit]
- DELETE /admin/roles/{role_id} - 删除角色 [权限: admin.roles.delete]

系统角色的修改与删除返回 400 (system_role_immutable)。
"""
from fastapi import APIRouter, Depends, status

from henwiki.deps.auth import get_role_service, require_permission
from henwiki.schemas.base import MessageResponse
from henwiki.schemas.rbac import (
    PermissionRead,
    RoleCreate,
    RoleDetailRead,
    RoleListResponse,
    RoleUpdate,
)
from henwiki.services.rbac import RoleService, RoleWithPermissions

router = APIRouter(prefix="/admin", tags=["Admin - Roles"])


def _to_detail(item: RoleWithPermissions) -> RoleDetailRead:
    return RoleDetailRead.model_validate(item.role).model_copy(
        update={"permissions": [PermissionRead.model_validate(p) for p in item.permissions]}
    )


@router.get(
    "/roles",
    response_model=RoleListResponse,
    dependencies=[Depends(require_permission("admin.roles.view"))],
)
async def list_roles(
    service: RoleService = Depends(get_role_service),
) -> RoleListResponse:
    items = await service.list_roles_with_permissions()
    return RoleListResponse(roles=[_to_detail(item) for item in items])


@router.post(
    "/roles",
    response_model=RoleDetailRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("admin.roles.create"))],
)
async def create_role(
    payload: RoleCreate,
    service: RoleService = Depends(get_role_service),
) -> RoleDetailRead:
    role_id = await service.create_role(
        code=payload.code,
        name=payload.name,
        description=payload.description,
        level=payload.level,
        permission_ids=payload.permission_ids,
    )
    return _to_detail(await service.get_role_with_permissions(role_id))


@router.put(
    "/roles/{role_id}",
    response_model=RoleDetailRead,
    dependencies=[Depends(require_permission("admin.roles.edit"))],
)
async def update_role(
    role_id: int,
    payload: RoleUpdate,
    service: RoleService = Depends(get_role_service),
) -> RoleDetailRead:
    """仅更新请求体中出现的字段"""
    changes = payload.model_dump(exclude_unset=True, exclude={"permission_ids"})
    await service.update_role(role_id, changes, permission_ids=payload.permission_ids)
    return _to_detail(await service.get_role_with_permissions(role_id))


@router.delete(
    "/roles/{role_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("admin.roles.delete"))],
)
async def delete_role(
    role_id: int,
    service: RoleService = Depends(get_role_service),
) -> MessageResponse:
    await service.delete_role(role_id)
    return MessageResponse(message="Role deleted")
