"""
权限目录 API 路由 (/api/v1/admin/permissions)

端点:
- GET /admin/permissions?module= - 权限列表及按模块分组 [权限: admin.permissions.manage]
"""
from fastapi import APIRouter, Depends, Query

from henwiki.deps.auth import get_permission_catalog, require_permission
from henwiki.schemas.rbac import PermissionListResponse, PermissionRead
from henwiki.services.rbac import PermissionCatalog

router = APIRouter(prefix="/admin", tags=["Admin - Permissions"])


@router.get(
    "/permissions",
    response_model=PermissionListResponse,
    dependencies=[Depends(require_permission("admin.permissions.manage"))],
)
async def list_permissions(
    module: str | None = Query(None, description="按模块筛选"),
    catalog: PermissionCatalog = Depends(get_permission_catalog),
) -> PermissionListResponse:
    if module:
        permissions = await catalog.get_permissions_by_module(module)
    else:
        permissions = await catalog.get_all_permissions()

    grouped = catalog.group_by_module(permissions)
    return PermissionListResponse(
        permissions=[PermissionRead.model_validate(p) for p in permissions],
        grouped={
            name: [PermissionRead.model_validate(p) for p in items]
            for name, items in grouped.items()
        },
    )
