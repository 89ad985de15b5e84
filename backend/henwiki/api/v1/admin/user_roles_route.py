"""
用户角色分配 API 路由 (/api/v1/admin/users/{user_id}/roles)

端点:
- GET /admin/users/{user_id}/roles - 用户当前角色 [权限: admin.users.view]
- PUT /admin/users/{user_id}/roles - 全量替换用户角色 [权限: admin.users.role.assign]
"""
from fastapi import APIRouter, Depends

from henwiki.deps.auth import get_assignment_service, require_permission
from henwiki.schemas.rbac import RoleAssignment, RoleRead, UserRolesResponse
from henwiki.services.rbac import AssignmentService

router = APIRouter(prefix="/admin", tags=["Admin - User Roles"])


@router.get(
    "/users/{user_id}/roles",
    response_model=UserRolesResponse,
    dependencies=[Depends(require_permission("admin.users.view"))],
)
async def get_user_roles(
    user_id: int,
    service: AssignmentService = Depends(get_assignment_service),
) -> UserRolesResponse:
    roles = await service.get_user_roles(user_id)
    return UserRolesResponse(user_id=user_id, roles=[RoleRead.model_validate(r) for r in roles])


@router.put(
    "/users/{user_id}/roles",
    response_model=UserRolesResponse,
    dependencies=[Depends(require_permission("admin.users.role.assign"))],
)
async def assign_user_roles(
    user_id: int,
    payload: RoleAssignment,
    service: AssignmentService = Depends(get_assignment_service),
) -> UserRolesResponse:
    """全量替换：请求中未出现的角色会被移除，空列表清空全部角色"""
    await service.assign_roles_to_user(user_id, payload.role_ids)
    roles = await service.get_user_roles(user_id)
    return UserRolesResponse(user_id=user_id, roles=[RoleRead.model_validate(r) for r in roles])
