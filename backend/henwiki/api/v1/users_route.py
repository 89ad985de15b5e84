"""
用户 API 路由 (/api/v1/users)

端点:
- GET /users/me - 当前用户资料（角色、有效权限、权限标记）[需登录]
"""
from fastapi import APIRouter, Depends

from henwiki.deps.auth import get_current_identity, get_user_profile_service
from henwiki.schemas.user import UserMe
from henwiki.services.rbac import Identity
from henwiki.services.user_profile_service import UserProfileService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserMe)
async def read_me(
    identity: Identity = Depends(get_current_identity),
    service: UserProfileService = Depends(get_user_profile_service),
) -> UserMe:
    return await service.get_profile(identity)
